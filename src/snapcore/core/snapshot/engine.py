"""
Snapshot engine: decide whether a value becomes a new baseline or is checked.

Flow of one call
----------------
::

    START -> (await if Pending) -> KEY-RESOLVED -> LOOKUP
        LOOKUP -> NOT-FOUND -> CI-BLOCK            (raise, nothing written)
                            -> WRITE -> RETURN     (transformed value)
        LOOKUP -> FOUND -> COMPARE -> MATCH -> RETURN (stored value)
                                   -> MISMATCH -> RAISE

Keys
----
An ``exact_key`` is used verbatim and never touches the counters. Otherwise
the key is ``"<test_id> <index>"`` where ``index`` comes from the engine's
:class:`CounterRegistry`, so the third snapshot of a test is always
``"<test_id> 3"`` as long as the registry is reset between runs.

Validation
----------
Every call is validated before any I/O, and before a pending value is
awaited: an invalid call raises :class:`InvalidCallError` straight from
:meth:`SnapshotEngine.evaluate` even when the value is still pending.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.console import Console
from rich.pretty import Pretty

from snapcore.core.contracts.call import (
    CompareFn,
    RaiseFn,
    SnapshotCall,
    SnapshotOptions,
    TransformFn,
)
from snapcore.core.contracts.value import (
    UNSET,
    Immediate,
    Pending,
    SnapshotValue,
    as_snapshot_value,
)
from snapcore.core.errors import CIWriteForbiddenError, EmptyTextSnapshotError, InvalidCallError
from snapcore.core.settings import Settings, get_logger, load_settings
from snapcore.storage.base import SnapshotStore

from .compare import compare as default_compare
from .counters import CounterRegistry
from .normalize import normalize
from .prune import UsageRecorder

logger = get_logger("snapcore.engine")


def form_key(test_id: str, index: int) -> str:
    """Return the snapshot key of the ``index``-th call inside ``test_id``."""
    return f"{test_id} {index}"


def _identity(value: Any) -> Any:
    return value


def _is_unempty_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _reject_unset(value: Any) -> None:
    if value is UNSET:
        raise InvalidCallError("Cannot store an unset value: pass `value`")


@dataclass(frozen=True, slots=True)
class _PreparedCall:
    """A validated call with every default filled in."""

    value: SnapshotValue
    file: str
    test_id: str | None
    exact_key: str | None
    ext: str
    comment: str | None
    options: SnapshotOptions
    transform: TransformFn
    compare: CompareFn
    raiser: RaiseFn

    @property
    def name(self) -> str:
        return self.test_id or self.exact_key or ""


class SnapshotEngine:
    """Store-or-compare engine bound to one store and one counter registry.

    Parameters
    ----------
    store:
        Backing :class:`SnapshotStore`; chosen by the embedding application.
    counters:
        Registry used for non-exact keys. A fresh one is created if omitted,
        so separate engines never share counts by accident.
    settings:
        Source of defaults (CI flag, update flag, extension). Defaults to the
        cached :func:`load_settings` instance.
    recorder:
        Optional :class:`UsageRecorder` fed with every resolved key; its
        contents drive :class:`~snapcore.core.snapshot.prune.Pruner` after a run.
    console:
        Rich console for ``show`` / ``dry_run`` / CI messages.
    """

    def __init__(
        self,
        store: SnapshotStore,
        *,
        counters: CounterRegistry | None = None,
        settings: Settings | None = None,
        recorder: UsageRecorder | None = None,
        console: Console | None = None,
    ) -> None:
        self.store = store
        self.counters = counters if counters is not None else CounterRegistry()
        self.settings = settings if settings is not None else load_settings()
        self.recorder = recorder
        self.console = console if console is not None else Console()

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #
    def evaluate(self, call: SnapshotCall) -> Any:
        """Record or check ``call.value``.

        Returns
        -------
        Any
            For an immediate value: the stored value (new baseline after the
            ``transform`` hook, or the existing baseline on a match). For a
            :class:`Pending` value: a coroutine resolving to the same.

        Raises
        ------
        InvalidCallError
            Raised synchronously for malformed calls, also for pending values.
        CIWriteForbiddenError
            No baseline exists and ``options.ci`` is true.
        SnapshotMismatchError
            Raised by the default raiser when the baseline differs.
        """
        prepared = self._prepare(call)
        if isinstance(prepared.value, Pending):
            return self._evaluate_pending(prepared, prepared.value)
        return self._set_or_check(prepared, prepared.value.value)

    def match(self, value: Any, **fields: Any) -> Any:
        """Keyword shortcut for ``evaluate(SnapshotCall(value=value, **fields))``."""
        try:
            call = SnapshotCall(value=value, **fields)
        except TypeError as exc:
            raise InvalidCallError(str(exc)) from exc
        return self.evaluate(call)

    def restore(self, *, test_id: str | None = None, file: str | None = None) -> None:
        """Reset counters: all of them, or the one of ``test_id`` inside ``file``."""
        if test_id is None and file is None:
            logger.debug("restoring all counters")
            self.counters.reset_all()
            return
        if not isinstance(file, str) or not file:
            raise InvalidCallError(f"missing file to restore counter of {test_id!r}")
        if not isinstance(test_id, str) or not test_id:
            raise InvalidCallError(f"missing test_id to restore counter in {file!r}")
        logger.debug('restoring counter for file "%s" test "%s"', file, test_id)
        self.counters.reset_one(test_id)

    # --------------------------------------------------------------------- #
    # Validation
    # --------------------------------------------------------------------- #
    def _prepare(self, call: SnapshotCall) -> _PreparedCall:
        value = as_snapshot_value(call.value)
        if isinstance(value, Immediate):
            _reject_unset(value.value)

        file = call.file or call.source_file
        if not _is_unempty_str(file):
            raise InvalidCallError(f"missing file: {file!r}")
        if call.test_id is not None and not _is_unempty_str(call.test_id):
            raise InvalidCallError(f"invalid test_id: {call.test_id!r}")
        if call.exact_key is not None and not _is_unempty_str(call.exact_key):
            raise InvalidCallError(f"invalid exact_key: {call.exact_key!r}")
        if not (call.test_id or call.exact_key):
            raise InvalidCallError("missing either test_id or exact_key")

        hooks = call.hooks
        for label, hook in (
            ("transform", hooks.transform),
            ("compare", hooks.compare),
            ("raiser", hooks.raiser),
        ):
            if hook is not None and not callable(hook):
                raise InvalidCallError(f"invalid {label} function: {hook!r}")

        ext = call.ext if call.ext is not None else self.settings.default_extension
        if not _is_unempty_str(ext) or not ext.startswith("."):
            raise InvalidCallError(f"extension should start with '.': {ext!r}")
        if call.comment is not None and not _is_unempty_str(call.comment):
            raise InvalidCallError(f"wrong comment type: {call.comment!r}")

        return _PreparedCall(
            value=value,
            file=str(file),
            test_id=call.test_id,
            exact_key=call.exact_key,
            ext=ext,
            comment=call.comment,
            options=self._resolve_options(call.options),
            transform=hooks.transform or _identity,
            compare=hooks.compare or default_compare,
            raiser=hooks.raiser or self.store.raise_if_different,
        )

    def _resolve_options(
        self, options: SnapshotOptions | Mapping[str, Any] | None
    ) -> SnapshotOptions:
        """Validate ``options`` and fill ``ci`` / ``update`` from settings."""
        if options is None:
            resolved = SnapshotOptions()
        elif isinstance(options, SnapshotOptions):
            resolved = options
        else:
            try:
                resolved = SnapshotOptions.model_validate(dict(options))
            except ValidationError as exc:
                raise InvalidCallError(f"invalid snapshot options: {exc}") from exc

        defaults: dict[str, bool] = {}
        if resolved.ci is None:
            defaults["ci"] = self.settings.is_ci
            logger.debug("set CI flag to %s", defaults["ci"])
        if resolved.update is None:
            defaults["update"] = self.settings.update
        return resolved.model_copy(update=defaults) if defaults else resolved

    # --------------------------------------------------------------------- #
    # Decision logic
    # --------------------------------------------------------------------- #
    async def _evaluate_pending(self, prepared: _PreparedCall, pending: Pending[Any]) -> Any:
        resolved = await pending.awaitable
        _reject_unset(resolved)
        return self._set_or_check(prepared, resolved)

    def _resolve_key(self, prepared: _PreparedCall) -> tuple[str, int]:
        if prepared.exact_key:
            return prepared.exact_key, 0
        test_id = prepared.name
        index = self.counters.next_index(test_id)
        logger.debug('test "%s" snapshot is #%d', test_id, index)
        return form_key(test_id, index), index

    def _set_or_check(self, prepared: _PreparedCall, raw: Any) -> Any:
        key, index = self._resolve_key(prepared)
        if self.recorder is not None:
            self.recorder.record(prepared.file, key, prepared.ext)

        value = normalize(raw)
        options = prepared.options

        logger.debug("loading snapshots for %s%s key %r", prepared.file, prepared.ext, key)
        records = self.store.load_records(
            prepared.file, prepared.ext, use_relative_path=options.use_relative_path
        )
        if records is None or key not in records or options.update:
            if options.ci:
                self.console.print(f"current directory {Path.cwd()}")
                self.console.print("new value to save:", Pretty(value))
                raise CIWriteForbiddenError(file=prepared.file, key=key, name=prepared.name)
            return self._store_value(prepared, key, index, value, records or {})

        expected = records[key]
        logger.debug('found snapshot for "%s"', prepared.name)
        prepared.raiser(
            value=value,
            expected=expected,
            test_id=prepared.name,
            compare=prepared.compare,
        )
        return expected

    def _store_value(
        self,
        prepared: _PreparedCall,
        key: str,
        index: int,
        value: Any,
        records: dict[str, Any],
    ) -> Any:
        stored = prepared.transform(value)
        if isinstance(stored, str) and not stored.strip():
            raise EmptyTextSnapshotError(key)
        if prepared.comment:
            logger.debug("comment for %r: %s", key, prepared.comment)

        records[key] = stored
        options = prepared.options
        if options.show or options.dry_run:
            relative = self.store.path_relative_to_cwd(prepared.file)
            self.console.print(f'saving snapshot "{key}" for file {relative}')
            self.console.print(Pretty(stored))

        if not options.dry_run:
            self.store.save_records(
                prepared.file,
                records,
                prepared.ext,
                sort_snapshots=options.sort_snapshots,
                use_relative_path=options.use_relative_path,
            )
            logger.debug('saved updated snapshot %d for test "%s"', index, prepared.name)
        return stored


__all__ = ["SnapshotEngine", "form_key"]
