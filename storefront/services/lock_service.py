import uuid
from contextlib import contextmanager

import redis
from redis.exceptions import RedisError
from tenacity import (
    RetryError,
    Retrying,
    retry,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
    wait_random,
)

from storefront.domain.errors import CartBusy, UpstreamFailure
from storefront.utils.settings import REDIS_URL, CART_LOCK_TTL_MS, CART_LOCK_WAIT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nikt nie wcisnie sie miedzy GET a DEL
#wiec lock zwalnia tylko ten kto go zalozyl (token)

#tenacity retry
def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(RedisError),
    )


def _cart_key(user_id: str) -> str:
    return f"cart:{user_id}:lock"


class LockService:
    """
    -blokada koszyka per uzytkownik (wszystkie mutacje koszyka + zlozenie zamowienia)
    -zwalnianie locka tokenem
    -atomowosc przy pomocy lua
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client if client is not None else redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def acquire_cart_lock(self, user_id: str, token: str, ttl_ms: int) -> bool:
        #SET cart:42:lock "<token>" NX PX 10000
        return bool(
            self.redis.set(
                name=_cart_key(user_id),
                value=token,
                nx=True, #tylko jesli klucz nie istnieje
                px=ttl_ms, #wygasa sam, nawet jak proces padnie w srodku sekcji
            )
        )

    @redis_retry()
    def release_cart_lock(self, user_id: str, token: str) -> bool:
        res = self.redis.eval(_RELEASE_LUA, 1, _cart_key(user_id), token)
        return bool(res)

    @contextmanager
    def cart_lock(self, user_id: str, ttl_ms: int | None = None, wait_seconds: float | None = None):
        """
        Sekcja krytyczna dla koszyka uzytkownika.
        Czeka na locka max wait_seconds, potem CartBusy.
        """
        token = uuid.uuid4().hex
        ttl_ms = ttl_ms or CART_LOCK_TTL_MS
        wait_seconds = CART_LOCK_WAIT_SECONDS if wait_seconds is None else wait_seconds

        waiter = Retrying(
            stop=stop_after_delay(wait_seconds),
            wait=wait_random(min=0.01, max=0.05),
            retry=retry_if_result(lambda acquired: not acquired),
        )

        try:
            waiter(self.acquire_cart_lock, user_id, token, ttl_ms)
        except RetryError:
            logger.warning(f"Timed out waiting for cart lock of user {user_id}")
            raise CartBusy()
        except RedisError as e:
            logger.error(f"Redis unavailable while locking cart of user {user_id}: {e}")
            raise UpstreamFailure("Lock service unavailable")

        try:
            yield
        finally:
            try:
                if not self.release_cart_lock(user_id, token):
                    logger.warning(f"Cart lock of user {user_id} expired before release")
            except RedisError as e:
                # TTL i tak go zdejmie
                logger.warning(f"Failed to release cart lock of user {user_id}: {e}")
