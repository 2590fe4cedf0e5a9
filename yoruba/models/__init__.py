"""
Models package - imports all models so they are registered with SQLModel.
"""
from yoruba.models.models import *  # noqa: F401,F403
from yoruba.models.models import __all__  # noqa: F401
