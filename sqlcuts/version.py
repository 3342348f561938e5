APP_NAME = "sqlcuts"
__version__ = "0.1.0"
