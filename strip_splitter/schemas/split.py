from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from strip_splitter.splitting import SplitSettings


class CamelModel(BaseModel):
    """Model serialized with camelCase keys, accepting either form on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProcessSettings(CamelModel):
    """Settings for one batch, shared by every image in it."""

    split_height: int = Field(gt=0, description="Target segment height in pixels")
    sensitivity: int = Field(ge=0, le=100, description="Cut row sensitivity (higher = stricter)")
    scan_line_step: int = Field(ge=0, description="Row increment while searching (0 is treated as 1)")
    ignorable_border: int = Field(ge=0, description="Columns ignored on each side of a row")

    def to_split_settings(self) -> SplitSettings:
        return SplitSettings(
            split_height=self.split_height,
            sensitivity=self.sensitivity,
            scan_line_step=self.scan_line_step,
            ignorable_border=self.ignorable_border,
        )


class ProgressUpdate(CamelModel):
    """Progress event emitted after each source image."""

    current: int
    total: int
    percentage: float
    message: str


class ProcessResult(CamelModel):
    """Outcome of a batch."""

    success: bool
    message: str
    output_files: list[str] = Field(default_factory=list)
    total_images: int = 0
