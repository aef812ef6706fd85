"""Base classes and the fallback combinator for remote data sources."""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional

from ..data.models import Pair, SourceKind, SourceResult
from ..data.normalizer import ResponseNormalizer
from ..errors import DataQualityError, SystemFailureError, TransportError
from ..fallback.generator import FallbackGenerator
from ..logging.config import get_source_logger, log_fallback_used
from ..utils.time import Clock, utc_now
from .http import ApiClient

logger = get_source_logger(__name__)


async def recover_with_fallback(
    attempt: Callable[[], Awaitable[Any]],
    fallback: Callable[[], Any],
    *,
    kind: SourceKind,
    pair: Optional[Pair] = None
) -> SourceResult:
    """
    Run a remote attempt and substitute fallback data on failure.

    Transport failures and data quality errors are recovered here and never
    reach the caller. System failures (including a broken fallback contract)
    propagate.

    Args:
        attempt: Coroutine factory performing request and normalization
        fallback: Factory for synthetic data of the same shape
        kind: Source kind, for the result and logging
        pair: Pair the fetch targets, if any

    Returns:
        SourceResult with ``ok`` recording which path produced ``data``
    """
    pair_value = pair.value if pair else None

    try:
        data = await attempt()
    except SystemFailureError:
        raise
    except (TransportError, DataQualityError) as e:
        reason = str(e)
        log_fallback_used(
            logger, kind.value, pair_value, reason,
            context={"error_type": type(e).__name__}
        )
    except Exception as e:
        reason = f"Unexpected error: {e}"
        logger.error(
            "Unexpected error fetching source",
            source_kind=kind.value,
            pair=pair_value,
            error=str(e),
            exc_info=True
        )
        log_fallback_used(
            logger, kind.value, pair_value, reason,
            context={"error_type": type(e).__name__}
        )
    else:
        return SourceResult.success(kind, data, pair)

    return SourceResult.fallback(kind, fallback(), pair, reason)


class DataSourceClient(ABC):
    """
    Base class for the four remote sources.

    ``fetch`` never raises for transport or schema problems; the returned
    data has the same shape whether it is real or synthetic.
    """

    kind: SourceKind

    def __init__(
        self,
        api: ApiClient,
        fallback: FallbackGenerator,
        normalizer: Optional[ResponseNormalizer] = None,
        clock: Clock = utc_now
    ) -> None:
        self.api = api
        self.fallback = fallback
        self.normalizer = normalizer or ResponseNormalizer()
        self.clock = clock
        self.logger = logger.bind(source_kind=self.kind.value)

    async def fetch(self, pair: Optional[Pair] = None, **params: Any) -> SourceResult:
        """Fetch from the remote source, falling back to synthetic data."""
        return await recover_with_fallback(
            lambda: self._fetch_remote(pair, **params),
            lambda: self._fallback_data(pair, **params),
            kind=self.kind,
            pair=pair,
        )

    @abstractmethod
    async def _fetch_remote(self, pair: Optional[Pair], **params: Any) -> Any:
        """Request and normalize remote data, raising on any failure."""
        pass

    @abstractmethod
    def _fallback_data(self, pair: Optional[Pair], **params: Any) -> Any:
        """Synthesize data in the normalized shape."""
        pass
