# This file marks the routers package for API route modules.
# One module per library entity, plus the operational health routes.
