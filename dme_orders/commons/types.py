from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class OrderPayload(BaseModel):
    """Wire shape of an OrderRecord; absent optionals are dropped on dump."""

    device: str
    patient_name: str
    dob: str
    diagnosis: str
    ordering_provider: str
    qualifier: Optional[str] = None
    liters: Optional[str] = None
    mask_type: Optional[str] = None
    add_ons: Optional[List[str]] = None
    usage: Optional[str] = None


class AppCfg(BaseModel):
    name: str = "dme-order-extractor"
    log_level: str = "INFO"


class PathsCfg(BaseModel):
    logs_root: str = "logs"


class ApiCfg(BaseModel):
    base_url: str
    endpoint_path: str = ""
    timeout_sec: float = 10.0

    @field_validator("base_url")
    @classmethod
    def _not_empty(cls, v: str):
        if not v or not v.strip():
            raise ValueError("api.base_url es obligatorio")
        return v.strip()

    @property
    def endpoint_url(self) -> str:
        if not self.endpoint_path:
            return self.base_url
        return f"{self.base_url.rstrip('/')}/{self.endpoint_path.lstrip('/')}"


class ExtractionCfg(BaseModel):
    pattern_timeout_sec: float = Field(default=1.0, gt=0)


class Settings(BaseModel):
    app: AppCfg = AppCfg()
    paths: PathsCfg = PathsCfg()
    api: ApiCfg
    extraction: ExtractionCfg = ExtractionCfg()
