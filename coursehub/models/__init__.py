# Importing the declarative base registers every model with the metadata.
from coursehub.db import base  # noqa
