from authgate.schemas.my_base_model import CustomBaseModel


class HealthCheck(CustomBaseModel):
    """Response model for the service health check"""

    status: str = "OK"
    timestamp: str = ""
    version: str = ""
    environment: str = ""
