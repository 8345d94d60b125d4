import threading
import time
import unittest

from deplookup import ImplicitOverwrite, Inject, Registry, Scope


THREADS = 16


def run_concurrently(target, count=THREADS):
    barrier = threading.Barrier(count)
    results = [None] * count
    errors = [None] * count

    def worker(i):
        barrier.wait()
        try:
            results[i] = target()
        except Exception as e:  # noqa: BLE001
            errors[i] = e

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return results, errors


class Service: ...


class TestConcurrentAccess(unittest.TestCase):
    def test_singleton_factory_runs_once_under_racing_fetches(self):
        reg = Registry()
        calls = []

        def slow_factory():
            calls.append(1)
            time.sleep(0.01)
            return Service()

        reg.register(Service, slow_factory)
        results, errors = run_concurrently(lambda: reg.fetch(Service))

        assert errors == [None] * THREADS
        assert len(calls) == 1
        assert all(r is results[0] for r in results)

    def test_only_one_concurrent_register_succeeds(self):
        reg = Registry()
        _, errors = run_concurrently(lambda: reg.register(Service, Service))

        succeeded = [e for e in errors if e is None]
        rejected = [e for e in errors if isinstance(e, ImplicitOverwrite)]
        assert len(succeeded) == 1
        assert len(rejected) == THREADS - 1

    def test_reference_scope_hands_out_one_instance_while_held(self):
        reg = Registry()
        reg.register(Service, Service, scope=Scope.REFERENCE)
        results, errors = run_concurrently(lambda: reg.fetch(Service))

        assert errors == [None] * THREADS
        assert all(r is results[0] for r in results)

    def test_inject_resolves_once_across_threads(self):
        reg = Registry()
        reg.register(Service, Service, scope=Scope.PROTOTYPE)
        accessor = Inject(Service, registry=reg)
        results, errors = run_concurrently(accessor.get)

        assert errors == [None] * THREADS
        assert all(r is results[0] for r in results)
