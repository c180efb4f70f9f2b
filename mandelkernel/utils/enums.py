from enum import Enum, auto

class BackendType(Enum):
    CPU = auto()
    THREADED = auto()
    NUMPY = auto()
