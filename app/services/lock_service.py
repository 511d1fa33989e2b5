import uuid

import redis
from redis.exceptions import RedisError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from app.utils.settings import REDIS_URL, CHECKOUT_LOCK_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje lua atomowo, nikt nie wcisnie sie miedzy GET a DEL
#wiec nie zwolnimy locka ktory w miedzyczasie wygasl i przejal go ktos inny


#tenacity retry
def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(RedisError),
    )


class LockService:
    """
    -blokada checkoutu na koszyk (jeden checkout na raz)
    -zwalnianie locka tylko przez wlasciciela (token)
    -atomowosc przy pomocy lua
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _checkout_key(cart_id: int) -> str:
        return f"cart:{cart_id}:checkout"

    @staticmethod
    def new_token() -> str:
        return uuid.uuid4().hex

    @redis_retry()
    def acquire_checkout_lock(self, cart_id: int, token: str, ttl: int = CHECKOUT_LOCK_TTL_SECONDS) -> bool:
        key = self._checkout_key(cart_id)
        logger.info(f"Acquire lock {key}")
        #SET cart:1:checkout "<token>" NX EX 30
        return bool(
            self.redis.set(
                name=key,
                value=token,
                nx=True, #tylko jesli nie istnieje
                ex=ttl, #wygasa sam, nawet jak proces padnie
            )
        )

    @redis_retry()
    def release_checkout_lock(self, cart_id: int, token: str) -> bool:
        key = self._checkout_key(cart_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)
