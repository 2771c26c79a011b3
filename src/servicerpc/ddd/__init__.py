from servicerpc.ddd.requests import ServiceRequest

__all__ = ["ServiceRequest"]
