# This file marks the schemas package for API request and response models.
# Each library entity keeps its create, update, and response contracts in its own module.
