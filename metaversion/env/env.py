from typing import Callable, Dict, Literal, Union

from pydantic import BaseModel, StrictStr

PrimaryType = Union[str, int, float, bytes, bool]


class Env(BaseModel):
    METAVERSION_BUILD_VERSION: StrictStr | None = None
    METAVERSION_LOG_LEVEL: Literal[
        "trace", "debug", "info", "warn", "error", "critical", "fatal"
    ] = "info"
    METAVERSION_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    METAVERSION_LOG_PATH: StrictStr | None = None

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "METAVERSION_BUILD_VERSION": str,
            "METAVERSION_LOG_LEVEL": str,
            "METAVERSION_LOG_OUTPUT": str,
            "METAVERSION_LOG_PATH": str,
        }
