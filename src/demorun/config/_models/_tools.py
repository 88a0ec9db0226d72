"""Tool executable configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class ToolSettings(BaseModel):
    """Executables the demo depends on.

    Each value is an executable name looked up on PATH, or a path. The
    values are also available to commands as `{java}`, `{maven}` and
    `{mysql}` placeholders.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    java: str = Field(default="java", min_length=1)
    maven: str = Field(default="mvn", min_length=1)
    mysql: str = Field(default="mysql", min_length=1)

    def as_dict(self) -> dict[str, str]:
        """Return the tools as a name-to-executable mapping."""
        return {"java": self.java, "maven": self.maven, "mysql": self.mysql}
