from sqlalchemy.orm import declarative_base

# Base declarative base (this is safe to create at import time)
Base = declarative_base()
