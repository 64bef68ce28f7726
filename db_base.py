from sqlalchemy.orm import DeclarativeBase

class Base(DeclarativeBase):
    """
    Declarative base shared by the user and asset models.

    Kept free of engine/session imports so model modules can be imported
    without pulling in an async driver.
    """
    pass
