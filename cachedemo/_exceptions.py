__all__ = ("CacheDemoError", "SimulatedServerError")


class CacheDemoError(Exception): ...


class SimulatedServerError(CacheDemoError): ...
