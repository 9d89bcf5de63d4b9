"""Controllers serving the platform's HTTP API.

Each controller is a plain object whose public methods are route
handlers: they take path parameters as positional strings and return
JSON-serializable data.
"""

from dataplatform.controllers.data import DataController
from dataplatform.controllers.health import HealthController
from dataplatform.controllers.home import HomeController

__all__ = ["DataController", "HealthController", "HomeController"]

