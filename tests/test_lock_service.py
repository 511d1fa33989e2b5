def test_checkout_lock_is_exclusive(lock_service):
    assert lock_service.acquire_checkout_lock(1, "a")
    assert not lock_service.acquire_checkout_lock(1, "b")
    # inny koszyk niezalezny
    assert lock_service.acquire_checkout_lock(2, "b")


def test_only_owner_can_release(lock_service):
    lock_service.acquire_checkout_lock(1, "a")

    assert not lock_service.release_checkout_lock(1, "b")
    assert lock_service.release_checkout_lock(1, "a")
    assert lock_service.acquire_checkout_lock(1, "b")


def test_lock_expires(lock_service):
    lock_service.acquire_checkout_lock(1, "a", ttl=30)
    assert 0 < lock_service.redis.ttl("cart:1:checkout") <= 30


def test_tokens_are_unique(lock_service):
    assert lock_service.new_token() != lock_service.new_token()
