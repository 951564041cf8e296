# This file marks the services package for API business logic modules.
# Services own sessions, queries, and domain rules so routers stay transport-focused.
