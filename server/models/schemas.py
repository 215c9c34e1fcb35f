"""DTOs and schemas for device state, commands and API responses"""
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

Mode = Literal["cool", "dry", "fan"]
FanSpeed = Literal["low", "med", "high", "auto"]
Swing = Literal["on", "off"]

TARGET_TEMP_MIN = 18
TARGET_TEMP_MAX = 32


class DeviceState(BaseModel):
    """Shared device/control state pushed to dashboards"""
    model_config = ConfigDict(extra="allow")

    temperature: Optional[float] = None
    humidity: Optional[float] = None
    target_temp: int = Field(25, alias="targetTemp")
    power: bool = False
    mode: Mode = "cool"
    fan_speed: FanSpeed = Field("auto", alias="fanSpeed")
    swing: Swing = "off"
    history: list[float] = Field(default_factory=list)
    humidity_history: list[float] = Field(default_factory=list, alias="humidityHistory")


# Commands: one model per recognized action.

class PowerCommand(BaseModel):
    action: Literal["power"]
    value: StrictBool

    def mutation(self):
        return "power", self.value


class SetModeCommand(BaseModel):
    action: Literal["set_mode"]
    value: Mode

    def mutation(self):
        return "mode", self.value


class SetFanCommand(BaseModel):
    action: Literal["set_fan"]
    value: FanSpeed

    def mutation(self):
        return "fanSpeed", self.value


class SetSwingCommand(BaseModel):
    action: Literal["set_swing"]
    value: Swing

    def mutation(self):
        return "swing", self.value


class TempCommand(BaseModel):
    action: Literal["temp"]
    value: int = Field(ge=TARGET_TEMP_MIN, le=TARGET_TEMP_MAX)

    @field_validator("value", mode="before")
    @classmethod
    def _parse_integer(cls, value: Any) -> Any:
        # Booleans are ints in Python; they are not temperatures.
        if isinstance(value, bool):
            raise ValueError("boolean is not a temperature")
        if isinstance(value, str):
            return int(value.strip())
        return value

    def mutation(self):
        return "targetTemp", self.value


class ReportCommand(BaseModel):
    action: Literal["report"]
    value: Any = None

    def mutation(self):
        return None


class UnknownCommand(BaseModel):
    """Anything whose action is missing or not recognized"""
    action: Optional[Any] = None
    value: Any = None

    def mutation(self):
        return None


Command = Annotated[
    Union[PowerCommand, SetModeCommand, SetFanCommand, SetSwingCommand, TempCommand, ReportCommand],
    Field(discriminator="action"),
]

KNOWN_ACTIONS = frozenset({"power", "set_mode", "set_fan", "set_swing", "temp", "report"})


class CommandResponse(BaseModel):
    """Response for POST /api/command"""
    status: str
    data: Any


class HealthResponse(BaseModel):
    """Schema for health check"""
    status: str
    timestamp: str
    active_connections: int
    esp32_connected: bool


class ApiInfoResponse(BaseModel):
    """Schema for API info"""
    message: str
    websocket: str
    dashboard: str
    command: str
    status: str
