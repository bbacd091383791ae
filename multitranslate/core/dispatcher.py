"""
Translation dispatcher

Fans one TranslationRequest out to every requested provider as independent
asyncio tasks and fans the outcomes back in, either as one aggregate
TranslationResponse or as StreamEvents delivered to a sink.

Every requested name yields exactly one outcome. Provider errors are captured
into that provider's result/event and never cancel siblings; a task that
crashes or is cancelled is reported as a named failure.
"""
import asyncio
from typing import Awaitable, Dict, Iterable, List, Optional

from multitranslate.config import DEFAULT_SERVICES, DISPATCH_TASK_TIMEOUT
from multitranslate.utils.unified_logger import get_logger, LogType
from .events import EventSink
from .exceptions import (
    AllProvidersFailedError,
    TaskFailureError,
    TranslationError,
    UnsupportedProviderError,
)
from .models import StreamEvent, TranslationRequest, TranslationResponse, TranslationResult
from .providers import ClientFactory, TranslationProvider
from .registry import ProviderRegistry, ProviderSpec, build_default_registry
from .resolver import ConfigurationResolver

SERVICE_NOT_SUPPORTED = "Service not supported"


class TranslationDispatcher:
    """Concurrent fan-out/fan-in over the provider registry"""

    def __init__(self,
                 registry: Optional[ProviderRegistry] = None,
                 resolver: Optional[ConfigurationResolver] = None,
                 client_factory: Optional[ClientFactory] = None,
                 task_timeout: float = DISPATCH_TASK_TIMEOUT,
                 default_services: Optional[Iterable[str]] = None):
        """
        Initialize the dispatcher

        Args:
            registry: Provider table (built-in providers when omitted)
            resolver: Per-provider configuration resolver
            client_factory: httpx client factory handed to every adapter
            task_timeout: Bound on each provider task in seconds (0 disables)
            default_services: Providers used when a request names none
        """
        self.registry = registry or build_default_registry()
        self.resolver = resolver or ConfigurationResolver()
        self.client_factory = client_factory
        self.task_timeout = task_timeout
        self.default_services = list(DEFAULT_SERVICES if default_services is None else default_services)
        self.logger = get_logger()

    def provider_names(self, request: TranslationRequest) -> List[str]:
        """Requested names in request order, or the default set. Duplicates are kept."""
        return list(request.services) if request.services else list(self.default_services)

    def display_name(self, requested_name: str) -> str:
        spec = self.registry.lookup(requested_name)
        return spec.display_name if spec else requested_name

    # === Per-provider preparation ===

    def _prepare(self, request: TranslationRequest, requested_name: str):
        """
        Look up and resolve one provider.

        Returns:
            (spec, adapter, config) ready for a network call

        Raises:
            UnsupportedProviderError: unknown name
            ConfigurationMissingError: credentials absent, nothing is sent
        """
        spec = self.registry.lookup(requested_name)
        if spec is None:
            raise UnsupportedProviderError(SERVICE_NOT_SUPPORTED, service=requested_name)
        resolution = self.resolver.resolve(request, requested_name, spec)
        if not resolution.ready:
            raise resolution.error
        adapter = self.registry.create_adapter(spec, self.client_factory)
        return spec, adapter, resolution.config

    async def _bounded(self, work: Awaitable, service: str):
        if not self.task_timeout:
            return await work
        try:
            return await asyncio.wait_for(work, timeout=self.task_timeout)
        except asyncio.TimeoutError:
            raise TaskFailureError(f"Translation timed out after {self.task_timeout:g}s",
                                   service=service) from None

    def _task_failure(self, task: asyncio.Task, requested_name: str) -> Optional[str]:
        """Failure message for a task that did not run to completion, else None."""
        if task.cancelled():
            message, details = "Translation task was cancelled", "cancelled"
        else:
            exc = task.exception()
            if exc is None:
                return None
            message, details = f"Translation task failed: {exc}", repr(exc)
        self.logger.error(message, LogType.ERROR_DETAIL, {
            'service': self.display_name(requested_name),
            'details': details,
        })
        return message

    def _log_result(self, name: str, error: Optional[str], text: str = ""):
        if error:
            self.logger.warning(f"{name} failed", LogType.PROVIDER_RESULT,
                                {'service': name, 'error': error})
        else:
            self.logger.info(f"{name} succeeded", LogType.PROVIDER_RESULT,
                             {'service': name, 'chars': len(text)})

    # === Aggregate mode ===

    async def _translate_one(self, request: TranslationRequest,
                             requested_name: str) -> TranslationResult:
        try:
            spec, adapter, config = self._prepare(request, requested_name)
            result = await self._bounded(
                adapter.translate(request.text, request.source_lang, request.target_lang, config),
                spec.display_name,
            )
        except TranslationError as e:
            name = self.display_name(requested_name)
            self._log_result(name, str(e))
            return TranslationResult.failure(name, str(e))
        self._log_result(result.name, None, result.text)
        return result

    async def dispatch(self, request: TranslationRequest) -> TranslationResponse:
        """
        Translate with every requested provider and wait for all of them.

        Returns:
            TranslationResponse with one entry per requested name, in completion
            order; failed providers carry `error`

        Raises:
            AllProvidersFailedError: no provider produced a translation
        """
        names = self.provider_names(request)
        self.logger.info("Dispatch started", LogType.DISPATCH_START, {
            'mode': 'aggregate',
            'source_lang': request.source_lang,
            'target_lang': request.target_lang,
            'services': names,
        })

        tasks: Dict[asyncio.Task, str] = {
            asyncio.ensure_future(self._translate_one(request.clone(), name)): name
            for name in names
        }
        results: List[TranslationResult] = []
        pending = set(tasks)
        try:
            while pending:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    failure = self._task_failure(task, tasks[task])
                    if failure is not None:
                        results.append(TranslationResult.failure(self.display_name(tasks[task]), failure))
                    else:
                        results.append(task.result())
        finally:
            for task in pending:
                task.cancel()

        succeeded = sum(1 for result in results if result.ok)
        self.logger.info("Dispatch complete", LogType.DISPATCH_END,
                         {'succeeded': succeeded, 'total': len(results)})
        if not succeeded:
            raise AllProvidersFailedError([(result.name, result.error) for result in results])
        return TranslationResponse(results=results)

    # === Streaming mode ===

    async def _emit(self, sink: EventSink, event: StreamEvent) -> None:
        """Deliver one event; a failed delivery is logged and dropped."""
        try:
            await sink.emit(event)
        except Exception as e:
            self.logger.warning(f"Stream event for '{event.service or '*'}' not delivered: {e}",
                                LogType.STREAM_EVENT, {'request_id': event.request_id})

    async def _stream_text(self, adapter: TranslationProvider, spec: ProviderSpec,
                           request: TranslationRequest, config, request_id: str,
                           sink: EventSink) -> str:
        if not adapter.supports_streaming:
            result = await adapter.translate(request.text, request.source_lang,
                                             request.target_lang, config)
            return result.text

        async def on_delta(fragment: str) -> None:
            await self._emit(sink, StreamEvent.partial(request_id, spec.display_name, fragment))

        return await adapter.translate_stream(request.text, request.source_lang,
                                              request.target_lang, config, on_delta)

    async def _stream_one(self, request: TranslationRequest, requested_name: str,
                          request_id: str, sink: EventSink) -> bool:
        """Run one provider and emit its terminal event; True on success."""
        name = self.display_name(requested_name)
        try:
            spec, adapter, config = self._prepare(request, requested_name)
            text = await self._bounded(
                self._stream_text(adapter, spec, request, config, request_id, sink),
                spec.display_name,
            )
        except TranslationError as e:
            self._log_result(name, str(e))
            await self._emit(sink, StreamEvent.failed(request_id, name, str(e)))
            return False
        self._log_result(name, None, text)
        await self._emit(sink, StreamEvent.completed(request_id, name, text))
        return True

    async def dispatch_stream(self, request: TranslationRequest, request_id: str,
                              sink: EventSink) -> None:
        """
        Translate with every requested provider, delivering events to `sink`.

        Per provider: zero or more delta events, then exactly one terminal event.
        After every task has finished, one all-done sentinel is emitted last.
        """
        names = self.provider_names(request)
        self.logger.info("Dispatch started", LogType.DISPATCH_START, {
            'mode': 'stream',
            'source_lang': request.source_lang,
            'target_lang': request.target_lang,
            'services': names,
        })

        tasks: Dict[asyncio.Task, str] = {
            asyncio.ensure_future(self._stream_one(request.clone(), name, request_id, sink)): name
            for name in names
        }
        try:
            if tasks:
                await asyncio.wait(tasks)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        succeeded = 0
        for task, name in tasks.items():
            failure = self._task_failure(task, name)
            if failure is not None:
                await self._emit(sink, StreamEvent.failed(request_id, self.display_name(name), failure))
            elif task.result():
                succeeded += 1

        await self._emit(sink, StreamEvent.sentinel(request_id))
        self.logger.info("Dispatch complete", LogType.DISPATCH_END,
                         {'succeeded': succeeded, 'total': len(tasks)})
