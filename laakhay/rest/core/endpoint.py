"""Endpoint descriptors.

An endpoint descriptor is an immutable description of one remote operation:
its method, path relative to the service base URL, authorization requirement
and, depending on its variant, the input and output shapes with their wire
formats.

Architecture:
    The four variants form a closed tagged union keyed by ``EndpointKind``:

    - EmptyEndpoint: no input, no output
    - InEndpoint: input only
    - OutEndpoint: output only
    - InOutEndpoint: input and output

    Variants without input have no ``input_format`` field and variants without
    output have no ``output_format`` field, so an invalid combination cannot
    be constructed. The runtime dispatches on ``kind`` instead of on class.

Design Decisions:
    - Frozen dataclasses: descriptors are created once (often at import time)
      and shared across threads
    - Shapes are any type pydantic can validate (models, dataclasses, dicts)
    - Convenience methods delegate to the runtime bridge so call sites read
      ``LOGIN.make_synchronous_request(service, input=credentials)``

Example:
    >>> class Token(BaseModel):
    ...     token: str
    >>> LOGIN = InOutEndpoint(
    ...     method=HTTPMethod.POST,
    ...     path="login",
    ...     input_type=Credentials,
    ...     output_type=Token,
    ... )
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from .enums import AuthorizationRequirement, EndpointKind, HTTPMethod, InputFormat, OutputFormat

if TYPE_CHECKING:
    import asyncio

    from .outcome import Outcome
    from .service import WebService

InT = TypeVar("InT")
OutT = TypeVar("OutT")

ProgressCallback = Callable[[float | None], None]


@dataclass(frozen=True, kw_only=True)
class Endpoint:
    """Fields and behaviour shared by every endpoint variant."""

    kind: ClassVar[EndpointKind]

    path: str
    method: HTTPMethod = HTTPMethod.GET
    authorization: AuthorizationRequirement = AuthorizationRequirement.NONE
    operation_name: str | None = None

    def __post_init__(self) -> None:
        if not self.path or not isinstance(self.path, str):
            raise ValueError("Endpoint path must be a non-empty string")
        object.__setattr__(self, "method", HTTPMethod(self.method))
        object.__setattr__(self, "authorization", AuthorizationRequirement(self.authorization))

    @property
    def name(self) -> str:
        """Name used in logs and error messages."""
        return self.operation_name or f"{self.method.value} {self.path}"

    async def execute(
        self,
        service: WebService | None = None,
        *,
        input: Any = None,
        on_progress: ProgressCallback | None = None,
    ) -> Any:
        """Run the request on the current event loop and return its value."""
        from ..runtime.executor import execute

        return await execute(self, service, input=input, on_progress=on_progress)

    def make_request(
        self,
        service: WebService | None = None,
        *,
        input: Any = None,
        callback_context: asyncio.AbstractEventLoop | Executor | None = None,
        on_progress: ProgressCallback | None = None,
        on_complete: Callable[[Outcome[Any]], None],
    ) -> Future[Outcome[Any]]:
        """Start the request in the background; ``on_complete`` fires once."""
        from ..runtime.bridge import make_request

        return make_request(
            self,
            service,
            input=input,
            callback_context=callback_context,
            on_progress=on_progress,
            on_complete=on_complete,
        )

    def make_synchronous_request(
        self, service: WebService | None = None, *, input: Any = None
    ) -> Any:
        """Block the calling thread until the request completes."""
        from ..runtime.bridge import make_synchronous_request

        return make_synchronous_request(self, service, input=input)


class _DownloadableMixin:
    """Download entry points for variants that produce output."""

    async def download(
        self,
        service: WebService | None = None,
        *,
        input: Any = None,
        on_progress: ProgressCallback | None = None,
    ) -> Path:
        """Stream the response body to a temporary file and return its path.

        The caller owns the file and is responsible for removing it.
        """
        from ..runtime.executor import download

        return await download(self, service, input=input, on_progress=on_progress)  # type: ignore[arg-type]

    def make_download_request(
        self,
        service: WebService | None = None,
        *,
        input: Any = None,
        callback_context: asyncio.AbstractEventLoop | Executor | None = None,
        on_progress: ProgressCallback | None = None,
        on_complete: Callable[[Outcome[Path]], None],
    ) -> Future[Outcome[Path]]:
        """Download in the background.

        The path passed to ``on_complete`` is only guaranteed to exist until the
        callback returns. Move or open the file inside the callback to keep it.
        """
        from ..runtime.bridge import make_download_request

        return make_download_request(
            self,  # type: ignore[arg-type]
            service,
            input=input,
            callback_context=callback_context,
            on_progress=on_progress,
            on_complete=on_complete,
        )


@dataclass(frozen=True, kw_only=True)
class EmptyEndpoint(Endpoint):
    """Endpoint with neither input nor output."""

    kind: ClassVar[EndpointKind] = EndpointKind.EMPTY


@dataclass(frozen=True, kw_only=True)
class InEndpoint(Endpoint, Generic[InT]):
    """Endpoint that sends input and expects no output."""

    kind: ClassVar[EndpointKind] = EndpointKind.IN

    input_type: type[InT] | Any
    input_format: InputFormat = InputFormat.JSON

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "input_format", InputFormat(self.input_format))


@dataclass(frozen=True, kw_only=True)
class OutEndpoint(_DownloadableMixin, Endpoint, Generic[OutT]):
    """Endpoint that sends nothing and decodes output."""

    kind: ClassVar[EndpointKind] = EndpointKind.OUT

    output_type: type[OutT] | Any
    output_format: OutputFormat = OutputFormat.JSON

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "output_format", OutputFormat(self.output_format))


@dataclass(frozen=True, kw_only=True)
class InOutEndpoint(_DownloadableMixin, Endpoint, Generic[InT, OutT]):
    """Endpoint that sends input and decodes output."""

    kind: ClassVar[EndpointKind] = EndpointKind.IN_OUT

    input_type: type[InT] | Any
    output_type: type[OutT] | Any
    input_format: InputFormat = InputFormat.JSON
    output_format: OutputFormat = OutputFormat.JSON

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "input_format", InputFormat(self.input_format))
        object.__setattr__(self, "output_format", OutputFormat(self.output_format))


AnyEndpoint = EmptyEndpoint | InEndpoint | OutEndpoint | InOutEndpoint
