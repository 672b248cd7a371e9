from carereport.api.main import app

__all__ = ["app"]
