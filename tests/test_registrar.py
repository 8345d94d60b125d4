import unittest

import pytest

from deplookup import CompositeRegistrar, ImplicitOverwrite, Registrar, Registry, Scope


class Database: ...


class Cache: ...


class Mailer: ...


class DatabaseModule:
    def register(self, registry: Registry) -> None:
        registry.register(Database, Database)


class CacheModule:
    def register(self, registry: Registry) -> None:
        registry.register(Cache, Cache, scope=Scope.REFERENCE)


class MailerModule:
    def register(self, registry: Registry) -> None:
        registry.register(Mailer, Mailer)


class FailingModule:
    error = RuntimeError("wiring failed")

    def register(self, registry: Registry) -> None:
        raise self.error


class TestCompositeRegistrar(unittest.TestCase):
    reg: Registry

    def setUp(self):
        self.reg = Registry()

    def test_modules_satisfy_registrar_protocol(self):
        assert isinstance(DatabaseModule(), Registrar)
        assert isinstance(CompositeRegistrar(), Registrar)

    def test_runs_registrars_in_order(self):
        CompositeRegistrar(DatabaseModule(), CacheModule()).register(self.reg)
        assert isinstance(self.reg.fetch(Database), Database)
        assert isinstance(self.reg.fetch(Cache), Cache)

    def test_stops_at_first_failure(self):
        composite = CompositeRegistrar(DatabaseModule(), FailingModule(), MailerModule())
        with pytest.raises(RuntimeError) as ctx:
            composite.register(self.reg)

        assert ctx.value is FailingModule.error
        assert self.reg.is_registered(Database)
        assert not self.reg.is_registered(Mailer)

    def test_duplicate_module_raises_implicit_overwrite(self):
        composite = CompositeRegistrar(DatabaseModule(), DatabaseModule(), MailerModule())
        with pytest.raises(ImplicitOverwrite):
            composite.register(self.reg)
        assert not self.reg.is_registered(Mailer)

    def test_composites_nest(self):
        inner = CompositeRegistrar(DatabaseModule(), CacheModule())
        CompositeRegistrar(inner, MailerModule()).register(self.reg)
        assert self.reg.is_registered(Database)
        assert self.reg.is_registered(Cache)
        assert self.reg.is_registered(Mailer)

    def test_install_returns_registry(self):
        reg = Registry().install(DatabaseModule(), MailerModule())
        assert reg.is_registered(Database)
        assert reg.is_registered(Mailer)
