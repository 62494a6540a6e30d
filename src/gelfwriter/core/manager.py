"""Writer manager responsible for runtime configuration and lifecycle."""

from __future__ import annotations

import logging

from ..config.schema import GELFWriterConfig
from ..handlers.gelf import GELFHandler, GELFHandlerConfig, build_gelf_handler
from .levels import ensure_level
from .validation import validate_configuration
from .writer import Writer


class WriterManager:
    """Own the configured writer and its handler on the root logger."""

    def __init__(self) -> None:
        self._config: GELFWriterConfig | None = None
        self._writer: Writer | None = None
        self._handler: GELFHandler | None = None

    # ------------------------------------------------------------------
    @property
    def config(self) -> GELFWriterConfig | None:
        return self._config

    @property
    def writer(self) -> Writer | None:
        return self._writer

    @property
    def handler(self) -> GELFHandler | None:
        return self._handler

    # ------------------------------------------------------------------
    def configure(self, config: GELFWriterConfig) -> None:
        """Apply the supplied configuration, replacing any previous writer.

        The new writer is built before the old one is torn down, so a failure
        (an unresolvable host, say) leaves the previous setup in place.
        """

        validate_configuration(config)

        cfg = config.writer
        handler = build_gelf_handler(
            GELFHandlerConfig(
                address=cfg.address,
                facility=cfg.facility,
                hostname=cfg.hostname,
                compression_type=cfg.compression_type,
                compression_level=cfg.compression_level,
                chunk_size=cfg.chunk_size,
                http_timeout=cfg.http.timeout,
                check_status=cfg.http.check_status,
                include_extra=config.handler.include_extra,
                level=ensure_level(config.handler.level),
            )
        )

        self._teardown()
        if config.handler.attach_root:
            logging.getLogger().addHandler(handler)

        self._config = config
        self._writer = handler.writer
        self._handler = handler

    # ------------------------------------------------------------------
    def shutdown(self) -> None:
        """Detach the handler and close the writer."""

        self._teardown()
        self._config = None

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    # ------------------------------------------------------------------
    def _teardown(self) -> None:
        if self._handler is not None:
            logging.getLogger().removeHandler(self._handler)
            self._handler.close()
        elif self._writer is not None:
            self._writer.close()
        self._handler = None
        self._writer = None


GLOBAL_MANAGER = WriterManager()
