"""Named-operation dispatch from the application layer onto the gateway."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from docgateway.errors import GatewayError, InvalidStateError
from docgateway.gateway import StorageAccessGateway
from docgateway.models import MethodResult

logger = logging.getLogger(__name__)

URI_ACCESS_CHANNEL: str = "docgateway/uri_access"
DOCUMENT_BROWSER_CHANNEL: str = "docgateway/document_browser"

Reply = Callable[[MethodResult], None]
MethodCallHandler = Callable[["MethodCall", Reply], None]


@dataclass(frozen=True)
class MethodCall:
    """A named operation with keyword arguments."""

    method: str
    arguments: dict[str, Any] = field(default_factory=dict)

    def argument(self, key: str) -> Optional[str]:
        """String argument `key`; missing or non-string values read as None."""
        value = self.arguments.get(key)
        return value if isinstance(value, str) else None


class MethodChannel:
    """
    A named channel dispatching calls to one handler.

    Each call is answered exactly once through its `reply` callback, either
    immediately or later (folder picks). A GatewayError raised by the handler
    is answered as a tagged error carrying the error's code.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._handler: Optional[MethodCallHandler] = None

    def set_method_call_handler(self, handler: Optional[MethodCallHandler]) -> None:
        self._handler = handler

    def invoke(self, call: MethodCall, reply: Reply) -> None:
        once = _OneShotReply(call, reply)
        if self._handler is None:
            once(MethodResult.not_implemented())
            return

        try:
            self._handler(call, once)
        except GatewayError as exc:
            logger.debug("%s.%s failed: %s", self.name, call.method, exc)
            once(MethodResult.error(exc.code, str(exc), exc.details or None))

    async def invoke_async(self, call: MethodCall) -> MethodResult:
        """Invoke and wait for the reply on the running event loop."""
        future: asyncio.Future[MethodResult] = asyncio.get_running_loop().create_future()

        def _reply(result: MethodResult) -> None:
            if not future.done():
                future.set_result(result)

        self.invoke(call, _reply)
        return await future


class _OneShotReply:
    def __init__(self, call: MethodCall, reply: Reply) -> None:
        self._call = call
        self._reply = reply
        self._done = False

    def __call__(self, result: MethodResult) -> None:
        if self._done:
            raise InvalidStateError("Reply already submitted", details={"method": self._call.method})
        self._done = True
        self._reply(result)


class GatewayBridge:
    """
    Exposes a StorageAccessGateway on two channels.

    uri_access: persistUriPermission, openUriBytes, listTreeDocumentsRecursively
    document_browser: pickDocumentTree, listDocumentChildren
    """

    def __init__(self, gateway: StorageAccessGateway) -> None:
        self._gateway = gateway
        self.uri_access = MethodChannel(URI_ACCESS_CHANNEL)
        self.document_browser = MethodChannel(DOCUMENT_BROWSER_CHANNEL)
        self.uri_access.set_method_call_handler(self._handle_uri_access)
        self.document_browser.set_method_call_handler(self._handle_document_browser)

    def channel(self, name: str) -> MethodChannel:
        for ch in (self.uri_access, self.document_browser):
            if ch.name == name:
                return ch
        raise KeyError(name)

    def _handle_uri_access(self, call: MethodCall, reply: Reply) -> None:
        if call.method == "persistUriPermission":
            reply(MethodResult.success(self._gateway.persist_permission(call.argument("uri"))))
        elif call.method == "openUriBytes":
            reply(MethodResult.success(self._gateway.read_bytes(call.argument("uri"))))
        elif call.method == "listTreeDocumentsRecursively":
            docs = self._gateway.list_recursively(call.argument("treeUri"))
            reply(MethodResult.success([d.to_tree_record() for d in docs]))
        else:
            reply(MethodResult.not_implemented())

    def _handle_document_browser(self, call: MethodCall, reply: Reply) -> None:
        if call.method == "pickDocumentTree":
            self._gateway.request_folder(lambda uri: reply(MethodResult.success(uri)))
        elif call.method == "listDocumentChildren":
            docs = self._gateway.list_children(call.argument("treeUri"), call.argument("parentUri"))
            reply(MethodResult.success([d.to_child_record() for d in docs]))
        else:
            reply(MethodResult.not_implemented())
