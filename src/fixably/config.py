"""
:py:mod:`fixably.config` holds the process-wide settings every request is built from.

Synopsis
--------

.. code-block:: python

   import fixably

   fixably.configure(api_key="pk_...", subdomain="demo")

"""
import os
import typing

from pydantic import BaseModel, ConfigDict

from .exceptions import ConfigurationError

ENVIRONMENT_VARIABLES: typing.Mapping[str, str] = {
    "api_key": "FIXABLY_API_KEY",
    "subdomain": "FIXABLY_SUBDOMAIN",
    "api_version": "FIXABLY_API_VERSION",
}


class Config(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    api_key: typing.Optional[str] = None
    subdomain: typing.Optional[str] = None
    api_version: str = "v3"
    domain: str = "fixably.com"
    timeout: typing.Optional[float] = None

    def require(self, name: str) -> typing.Any:
        """
        Returns the setting called ``name``, raising :py:class:`ConfigurationError`
        when it is missing or empty.
        """
        value = getattr(self, name)
        if value is None or value == "":
            raise ConfigurationError(name)
        return value

    @property
    def site(self) -> str:
        return f"https://{self.require('subdomain')}.{self.domain}/api/{self.api_version}"

    @classmethod
    def from_env(cls, environ: typing.Optional[typing.Mapping[str, str]] = None) -> "Config":
        environ = os.environ if environ is None else environ
        values = {
            name: environ[variable]
            for name, variable in ENVIRONMENT_VARIABLES.items()
            if environ.get(variable)
        }
        return cls(**values)


config = Config.from_env()


def configure(**values: typing.Any) -> Config:
    if not values:
        raise TypeError("configure must be called with at least one setting")
    for name, value in values.items():
        if name not in Config.model_fields:
            raise TypeError(f"unknown setting: {name}")
        setattr(config, name, value)
    return config
