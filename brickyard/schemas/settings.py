from pydantic import Field

from .common import ApiModel


class Setting(ApiModel):
    key: str = Field(min_length=1)
    value: str


# Settings are upserted whole, so input and record share one shape
SettingIn = Setting
