from pydantic import BaseModel
from datetime import timedelta
from ipaddress import IPv4Address, IPv6Address
from typing import Optional, Union


class ResponseMetrics(BaseModel):
    code: int = 200
    written: int = 0
    duration: timedelta = timedelta(0)
    wrote_header: bool = False


class HTTPRequestRecord(BaseModel):
    method: str
    path: str
    code: int = 200
    size: int = 0
    duration: timedelta = timedelta(0)
    ip_address: Optional[Union[IPv4Address, IPv6Address]] = None
    user_agent: str = ""
    referer: str = ""

    @property
    def duration_ms(self) -> int:
        return int(self.duration / timedelta(milliseconds=1))
