import unittest

from urbanstocks.models import CityScope, CountryScope, GlobalScope, ScopeLevel, ScopeState
from urbanstocks.scope import ScopeStore


class ScopeTransitionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = ScopeStore()

    def test_session_starts_global(self) -> None:
        self.assertEqual(self.store.state, ScopeState(scope=GlobalScope()))
        self.assertIs(self.store.state.level, ScopeLevel.GLOBAL)

    def test_reset_to_global_clears_everything_from_any_depth(self) -> None:
        for setup in (
            lambda: None,
            lambda: self.store.select_country("FRA", "France"),
            lambda: (self.store.select_country("FRA", "France"), self.store.select_city("c1", "Paris")),
        ):
            setup()
            state = self.store.reset_to_global()
            self.assertEqual(state.scope, GlobalScope())
            self.assertIsNone(state.country_name)
            self.assertIsNone(state.city_name)

    def test_city_selection_keeps_country_code(self) -> None:
        for iso3 in ("FRA", "USA", "DEU", "BRA"):
            self.store.reset_to_global()
            self.store.select_country(iso3, "X")
            state = self.store.select_city("c1", "Y")
            self.assertEqual(state.scope, CityScope(iso3=iso3, city_id="c1"))
            self.assertEqual(state.country_name, "X")
            self.assertEqual(state.city_name, "Y")

    def test_switching_city_within_city_scope_keeps_country(self) -> None:
        self.store.select_country("DEU", "Germany")
        self.store.select_city("5", "Berlin")
        state = self.store.select_city("6", None)
        self.assertEqual(state.scope, CityScope(iso3="DEU", city_id="6"))
        self.assertEqual(state.city_name, "City 6")

    def test_reselecting_country_drops_city(self) -> None:
        self.store.select_country("FRA", "France")
        self.store.select_city("c1", "Paris")
        state = self.store.select_country("FRA", "France")
        self.assertEqual(state.scope, CountryScope(iso3="FRA"))
        self.assertIsNone(state.city_name)

    def test_country_name_falls_back_to_code(self) -> None:
        state = self.store.select_country("DEU", None)
        self.assertEqual(state.country_name, "DEU")

    def test_reset_to_country_keeps_country_name(self) -> None:
        self.store.select_country("FRA", "France")
        self.store.select_city("c1", "Paris")
        state = self.store.reset_to_country()
        self.assertEqual(state.scope, CountryScope(iso3="FRA"))
        self.assertEqual(state.country_name, "France")
        self.assertIsNone(state.city_name)

    def test_city_selection_at_global_is_ignored(self) -> None:
        before = self.store.state
        with self.assertLogs("urbanstocks.scope", level="WARNING"):
            after = self.store.select_city("c1", "Paris")
        self.assertIs(after, before)
        self.assertIsInstance(self.store.scope, GlobalScope)

    def test_reset_to_country_at_global_is_ignored(self) -> None:
        self.store.select_country("FRA", "France")
        self.store.reset_to_global()
        with self.assertLogs("urbanstocks.scope", level="WARNING"):
            state = self.store.reset_to_country()
        self.assertEqual(state.scope, GlobalScope())


class MissingCountryCodeTests(unittest.TestCase):
    """Polygons whose iso3 could not be resolved must never become a scope."""

    def test_country_without_code_is_ignored_then_city_too(self) -> None:
        for code in (None, "", "   "):
            store = ScopeStore()
            with self.assertLogs("urbanstocks.scope", level="WARNING"):
                state = store.select_country(code, None)  # type: ignore[arg-type]
                store.select_city("c1", "Paris")
            self.assertEqual(state.scope, GlobalScope())
            self.assertEqual(store.scope, GlobalScope())

    def test_missing_code_keeps_previous_country(self) -> None:
        store = ScopeStore()
        store.select_country("FRA", "France")
        store.select_city("c1", "Paris")
        with self.assertLogs("urbanstocks.scope", level="WARNING"):
            store.select_country(None, "Unknown land")  # type: ignore[arg-type]
        self.assertEqual(store.scope, CityScope(iso3="FRA", city_id="c1"))

    def test_no_committed_city_scope_has_empty_code(self) -> None:
        store = ScopeStore()
        committed: list[ScopeState] = []
        store.subscribe(committed.append)
        with self.assertLogs("urbanstocks.scope", level="WARNING"):
            for code in (None, "", "DEU", None, ""):
                store.select_country(code, None)  # type: ignore[arg-type]
                store.select_city("5", None)
                store.reset_to_country()
        self.assertTrue(committed)
        for state in committed:
            if isinstance(state.scope, (CountryScope, CityScope)):
                self.assertTrue(state.scope.iso3)
                self.assertTrue(state.country_name)
        self.assertIn(CityScope(iso3="DEU", city_id="5"), [s.scope for s in committed])

    def test_city_selection_under_codeless_country_is_ignored(self) -> None:
        store = ScopeStore()
        store._state = ScopeState(scope=CountryScope(iso3=""))
        with self.assertLogs("urbanstocks.scope", level="WARNING"):
            state = store.select_city("c1", "Paris")
        self.assertEqual(state.scope, CountryScope(iso3=""))


class ScopeSubscriptionTests(unittest.TestCase):
    def test_same_selection_still_notifies(self) -> None:
        store = ScopeStore()
        seen: list[ScopeState] = []
        store.subscribe(seen.append)
        store.select_country("FRA", "France")
        store.select_country("FRA", "France")
        self.assertEqual(len(seen), 2)
        self.assertIsNot(seen[0], seen[1])
        self.assertEqual(seen[0], seen[1])

    def test_ignored_transition_does_not_notify(self) -> None:
        store = ScopeStore()
        seen: list[ScopeState] = []
        store.subscribe(seen.append)
        with self.assertLogs("urbanstocks.scope", level="WARNING"):
            store.select_city("c1", None)
        self.assertEqual(seen, [])

    def test_unsubscribe_stops_notifications(self) -> None:
        store = ScopeStore()
        seen: list[ScopeState] = []
        unsubscribe = store.subscribe(seen.append)
        store.select_country("FRA", None)
        unsubscribe()
        store.reset_to_global()
        self.assertEqual(len(seen), 1)

    def test_is_current_detects_stale_scope(self) -> None:
        store = ScopeStore()
        store.select_country("FRA", "France")
        requested = store.scope
        self.assertTrue(store.is_current(requested))
        store.select_city("c1", "Paris")
        self.assertFalse(store.is_current(requested))

    def test_state_to_dict(self) -> None:
        store = ScopeStore()
        store.select_country("DEU", "Germany")
        store.select_city("5", "Berlin")
        self.assertEqual(
            store.state.to_dict(),
            {
                "level": "city",
                "iso3": "DEU",
                "city_id": "5",
                "country_name": "Germany",
                "city_name": "Berlin",
            },
        )


if __name__ == "__main__":
    unittest.main()
