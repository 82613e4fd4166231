"""
Registry of owned counters with randomly drawn ids and step sizes.

Every mutating call folds fresh host inputs into the entropy pool, spawns a
one-shot ChaCha20 stream from the new state, draws what it needs and drops the
stream. The inputs are always folded in the same order: pool state, weak
seed, round counter (8 bytes, big-endian), caller account bytes.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from ..config import OVERFLOW_CHECKED, RegistryConfig
from ..crypto.pool import EntropyPool
from ..crypto.stream import ChaCha20Stream
from ..crypto.utils import format_hex, int_to_bytes, to_signed32
from ..host import HostEnvironment, ROUND_COUNTER_SIZE
from .account import AccountId
from .store import PrefixedMap

logger = logging.getLogger(__name__)

ID_SIZE = 16  # bytes, rendered as 32 hex characters
STEP_LOW = 0
STEP_HIGH = 256  # exclusive
I32_MIN = -(1 << 31)
I32_MAX = (1 << 31) - 1

COUNTERS_PREFIX = b"c"
OWNERS_PREFIX = b"o"


class RegistryError(Exception):
    """Base class for counter registry failures."""

    code = "ERR_REGISTRY"


class NotFound(RegistryError):
    """No counter exists with the requested id."""

    code = "ERR_COUNTER_NOT_FOUND"


class NotOwner(RegistryError):
    """The caller does not own the counter it tried to change."""

    code = "ERR_CALLER_NOT_OWNER"


class AlreadyInitialized(RegistryError):
    """The registry was initialized twice."""

    code = "ERR_ALREADY_INITIALIZED"


class NotInitialized(RegistryError):
    """The registry was used before being initialized."""

    code = "ERR_NOT_INITIALIZED"


class CounterOverflow(RegistryError):
    """A checked update would leave the signed 32-bit range."""

    code = "ERR_COUNTER_OVERFLOW"


class IdentifierCollision(RegistryError):
    """Every identifier draw for a creation hit an existing counter."""

    code = "ERR_ID_COLLISION"


@dataclass(frozen=True)
class CounterRecord:
    """Snapshot of one counter."""

    id: str
    value: int
    owner: AccountId


class CounterRegistry:
    """
    Counters keyed by random ids, each owned by the account that created it.

    The registry is single-threaded: wrap it in
    :class:`reseed.sync.SerializedRegistry` before sharing it between threads.
    """

    def __init__(self, env: HostEnvironment, config: Optional[RegistryConfig] = None):
        """
        Create an uninitialized registry.

        Args:
            env: Host environment supplying weak seeds, rounds and callers
            config: Registry settings; defaults when omitted
        """
        self.env = env
        self.config = config if config is not None else RegistryConfig()
        self._pool: Optional[EntropyPool] = None

        storage = {}
        self.counters: PrefixedMap[int] = PrefixedMap(COUNTERS_PREFIX, storage)
        self.owners: PrefixedMap[AccountId] = PrefixedMap(OWNERS_PREFIX, storage)

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None

    def initialize(self) -> 'CounterRegistry':
        """
        Seed the entropy pool from the host's weak seed.

        Returns:
            This registry, for chaining

        Raises:
            AlreadyInitialized: If called more than once
        """
        if self._pool is not None:
            raise AlreadyInitialized("Registry is already initialized")

        self._pool = EntropyPool.initialize(
            self.env.weak_random_seed(), self.config.hash_algorithm
        )
        logger.info(f"Counter registry initialized ({self.config.hash_algorithm}, "
                    f"overflow={self.config.overflow})")
        return self

    def _require_initialized(self) -> None:
        if self._pool is None:
            raise NotInitialized("Registry must be initialized before use")

    def _resolve_caller(self, caller: Optional[str]) -> AccountId:
        if caller is None:
            caller = self.env.caller_identity()
        return AccountId(caller)

    def _fresh_inputs(self, caller: AccountId) -> List[bytes]:
        return [
            bytes(self.env.weak_random_seed()),
            int_to_bytes(self.env.round_counter(), ROUND_COUNTER_SIZE),
            caller.to_bytes(),
        ]

    def _add_entropy(self, caller: AccountId) -> Tuple[EntropyPool, ChaCha20Stream]:
        """Reseed into a successor pool and open a stream on it; nothing is committed."""
        successor = self._pool.reseed(self._fresh_inputs(caller))
        return successor, successor.derive_stream()

    def _get_counter(self, counter_id: str) -> int:
        value = self.counters.get(counter_id)
        if value is None:
            raise NotFound(f"Counter not found: {counter_id}")
        return value

    def _get_owner(self, counter_id: str) -> AccountId:
        owner = self.owners.get(counter_id)
        if owner is None:
            raise NotFound(f"Counter not found: {counter_id}")
        return owner

    def _check_owner(self, caller: AccountId, counter_id: str) -> None:
        owner = self._get_owner(counter_id)
        if caller != owner:
            logger.warning(f"Rejected update of {counter_id} by {caller}: owned by {owner}")
            raise NotOwner(f"Caller {caller} does not own counter {counter_id}")

    def get_counter(self, counter_id: str) -> int:
        """
        Current value of a counter.

        Raises:
            NotFound: If no counter has this id
        """
        self._require_initialized()
        return self._get_counter(counter_id)

    def get_owner(self, counter_id: str) -> AccountId:
        """
        Owner of a counter.

        Raises:
            NotFound: If no counter has this id
        """
        self._require_initialized()
        return self._get_owner(counter_id)

    def get_record(self, counter_id: str) -> CounterRecord:
        """Snapshot of a counter's id, value and owner."""
        self._require_initialized()
        return CounterRecord(counter_id, self._get_counter(counter_id), self._get_owner(counter_id))

    def create_counter(self, caller: Optional[str] = None) -> str:
        """
        Create a counter with a random id and a random signed 32-bit value.

        Args:
            caller: Owner of the new counter; the host's caller when omitted

        Returns:
            The new counter's id, 32 lowercase hex characters

        Raises:
            IdentifierCollision: If every allowed id draw was already taken
        """
        self._require_initialized()
        caller = self._resolve_caller(caller)
        successor, stream = self._add_entropy(caller)

        for attempt in range(1, self.config.max_id_attempts + 1):
            counter_id = format_hex(stream.next_bytes(ID_SIZE))
            if counter_id not in self.counters:
                break
            logger.warning(f"Counter id collision on draw {attempt}, drawing again")
        else:
            raise IdentifierCollision(
                f"No free counter id after {self.config.max_id_attempts} draws"
            )

        value = stream.next_i32()

        self._pool = successor
        self.counters.insert(counter_id, value)
        self.owners.insert(counter_id, caller)

        logger.debug(f"Created counter {counter_id} for {caller}")
        return counter_id

    def increment(self, caller: Optional[str], counter_id: str) -> None:
        """
        Add a random amount in [0, 256) to a counter.

        Raises:
            NotFound: If no counter has this id
            NotOwner: If the caller does not own the counter
            CounterOverflow: If overflow checking is on and the sum leaves range
        """
        self._adjust(caller, counter_id, 1)

    def decrement(self, caller: Optional[str], counter_id: str) -> None:
        """
        Subtract a random amount in [0, 256) from a counter.

        Raises:
            NotFound: If no counter has this id
            NotOwner: If the caller does not own the counter
            CounterOverflow: If overflow checking is on and the result leaves range
        """
        self._adjust(caller, counter_id, -1)

    def _adjust(self, caller: Optional[str], counter_id: str, sign: int) -> None:
        self._require_initialized()
        caller = self._resolve_caller(caller)
        current = self._get_counter(counter_id)
        self._check_owner(caller, counter_id)

        successor, stream = self._add_entropy(caller)
        step = stream.next_uniform_int(STEP_LOW, STEP_HIGH)

        target = current + sign * step
        if not I32_MIN <= target <= I32_MAX:
            if self.config.overflow == OVERFLOW_CHECKED:
                raise CounterOverflow(
                    f"Counter {counter_id} would overflow: {current} {'+' if sign > 0 else '-'} {step}"
                )
            target = to_signed32(target)

        self._pool = successor
        self.counters.insert(counter_id, target)
        logger.debug(f"Counter {counter_id} {'incremented' if sign > 0 else 'decremented'} by {step}")

    def ids(self) -> Iterator[str]:
        """Iterate over counter ids in no particular order."""
        return self.counters.keys()

    def __contains__(self, counter_id: str) -> bool:
        return counter_id in self.counters

    def __len__(self) -> int:
        return len(self.counters)

    def __repr__(self) -> str:
        state = "initialized" if self.is_initialized else "uninitialized"
        return f"CounterRegistry({state}, counters={len(self.counters)})"
