import unittest

from picker.auth import CredentialChecker
from picker.catalog import Catalog, validate_restaurant
from picker.errors import Conflict, InvalidInput, NotFound, Unauthorized, VersionConflict
from picker.store import InMemoryDocumentStore


def _restaurant(**overrides) -> dict:
    record = {
        "id": 1,
        "name": "Pho 99",
        "foodTypes": ["vietnamese"],
        "serviceTypes": ["takeout", "dine-in"],
    }
    record.update(overrides)
    return record


class CatalogTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore(
            {
                "restaurants": [_restaurant()],
                "profiles": [
                    {"id": "all", "name": "All Restaurants"},
                    {"id": "date", "name": "Date Night"},
                ],
                "updatedBy": "seed",
            }
        )
        self.credentials = CredentialChecker(admin_password="hunter2")
        self.catalog = Catalog(store=self.store, credentials=self.credentials)
        self.token = self.credentials.authenticate("hunter2")

    def test_list_restaurants_is_repeatable(self):
        first = self.catalog.list_restaurants()
        second = self.catalog.list_restaurants()
        self.assertEqual(first, second)
        self.assertEqual(first, [_restaurant()])

    def test_add_restaurant_appends_and_commits(self):
        added = self.catalog.add_restaurant(
            _restaurant(id=2, name="Taqueria", profiles=["date"]), self.token
        )
        self.assertEqual(added["id"], 2)
        document = self.store.read().document
        self.assertEqual([r["id"] for r in document["restaurants"]], [1, 2])
        self.assertEqual(document["updatedBy"], "seed")
        self.assertEqual(len(document["profiles"]), 2)
        self.assertEqual(self.store.history, ["Add restaurant: Taqueria"])

    def test_add_restaurant_requires_credential(self):
        version = self.store.version
        with self.assertRaises(Unauthorized):
            self.catalog.add_restaurant(_restaurant(id=2), None)
        with self.assertRaises(Unauthorized):
            self.catalog.add_restaurant(_restaurant(id=2), "bogus")
        self.assertEqual(self.store.version, version)

    def test_add_restaurant_rejects_unknown_service_type(self):
        with self.assertRaises(InvalidInput) as ctx:
            self.catalog.add_restaurant(
                _restaurant(id=2, serviceTypes=["flying"]), self.token
            )
        self.assertIn("flying", ctx.exception.message)
        self.assertEqual(self.store.history, [])

    def test_add_restaurant_accepts_empty_food_types(self):
        added = self.catalog.add_restaurant(
            _restaurant(id=2, name="Mystery Box", foodTypes=[]), self.token
        )
        self.assertEqual(added["foodTypes"], [])
        self.assertEqual(len(self.catalog.list_restaurants()), 2)

    def test_mutations_require_credential(self):
        version = self.store.version
        for credential in (None, "bogus", "bm9wZTow"):
            with self.assertRaises(Unauthorized):
                self.catalog.delete_restaurant(1, credential)
            with self.assertRaises(Unauthorized):
                self.catalog.add_profile({"id": "veg", "name": "Vegetarian"}, credential)
            with self.assertRaises(Unauthorized):
                self.catalog.delete_profile("date", credential)
            with self.assertRaises(Unauthorized):
                self.catalog.delete_profile("all", credential)
        self.assertEqual(self.store.version, version)
        self.assertEqual(self.store.history, [])

    def test_add_restaurant_accepts_duplicate_id(self):
        self.catalog.add_restaurant(_restaurant(name="Pho 99 Again"), self.token)
        ids = [r["id"] for r in self.catalog.list_restaurants()]
        self.assertEqual(ids, [1, 1])

    def test_delete_restaurant(self):
        deleted = self.catalog.delete_restaurant(1, self.token)
        self.assertEqual(deleted["name"], "Pho 99")
        self.assertEqual(self.catalog.list_restaurants(), [])
        self.assertEqual(self.store.history, ["Delete restaurant: Pho 99"])

    def test_delete_missing_restaurant_leaves_document_unchanged(self):
        before = self.store.read()
        with self.assertRaises(NotFound):
            self.catalog.delete_restaurant(9999, self.token)
        after = self.store.read()
        self.assertEqual(before.version, after.version)
        self.assertEqual(before.document, after.document)

    def test_list_profiles_defaults_to_all(self):
        self.store.reset({"restaurants": []})
        self.assertEqual(
            self.catalog.list_profiles(), [{"id": "all", "name": "All Restaurants"}]
        )

    def test_add_profile_then_duplicate_conflicts(self):
        self.catalog.add_profile({"id": "veg", "name": "Vegetarian"}, self.token)
        profiles = self.catalog.list_profiles()
        self.assertIn({"id": "veg", "name": "Vegetarian"}, profiles)
        self.assertIn({"id": "all", "name": "All Restaurants"}, profiles)

        with self.assertRaises(Conflict):
            self.catalog.add_profile({"id": "veg", "name": "Veggie"}, self.token)

    def test_add_profile_materializes_default(self):
        self.store.reset({"restaurants": []})
        self.catalog.add_profile({"id": "veg", "name": "Vegetarian"}, self.token)
        self.assertEqual(
            self.store.read().document["profiles"],
            [
                {"id": "all", "name": "All Restaurants"},
                {"id": "veg", "name": "Vegetarian"},
            ],
        )

    def test_add_profile_requires_fields(self):
        for record in ({"id": "veg"}, {"name": "Vegetarian"}, {}, ["veg"]):
            with self.assertRaises(InvalidInput):
                self.catalog.add_profile(record, self.token)

    def test_delete_all_profile_is_refused(self):
        with self.assertRaises(InvalidInput):
            self.catalog.delete_profile("all", self.token)
        self.store.reset({"restaurants": []})
        with self.assertRaises(InvalidInput):
            self.catalog.delete_profile("all", self.token)

    def test_delete_profile(self):
        deleted = self.catalog.delete_profile("date", self.token)
        self.assertEqual(deleted, {"id": "date", "name": "Date Night"})
        self.assertEqual(self.store.history, ["Delete profile: Date Night"])

    def test_delete_missing_profile(self):
        before = self.store.version
        with self.assertRaises(NotFound):
            self.catalog.delete_profile("ghost", self.token)
        self.assertEqual(self.store.version, before)

    def test_stale_write_surfaces_conflict(self):
        class RacingStore(InMemoryDocumentStore):
            def read(self):
                snapshot = super().read()
                # Another writer commits between our read and our write.
                other = super().read()
                other.document["restaurants"].append({"id": 99, "name": "Racer"})
                InMemoryDocumentStore.write(self, other.document, other.version, "race")
                return snapshot

        catalog = Catalog(store=RacingStore(), credentials=self.credentials)
        with self.assertRaises(VersionConflict):
            catalog.add_profile({"id": "veg", "name": "Vegetarian"}, self.token)


class ValidateRestaurantTests(unittest.TestCase):
    def test_required_fields(self):
        for missing in ("name", "foodTypes", "serviceTypes"):
            record = _restaurant()
            del record[missing]
            with self.assertRaises(InvalidInput):
                validate_restaurant(record)

    def test_types(self):
        with self.assertRaises(InvalidInput):
            validate_restaurant(_restaurant(foodTypes="thai"))
        with self.assertRaises(InvalidInput):
            validate_restaurant(_restaurant(profiles="date"))

    def test_names_every_invalid_service_type(self):
        with self.assertRaises(InvalidInput) as ctx:
            validate_restaurant(_restaurant(serviceTypes=["takeout", "flying", "boat"]))
        self.assertEqual(ctx.exception.message, "Invalid service types: flying, boat")

    def test_empty_lists_are_present(self):
        record = _restaurant(foodTypes=[], serviceTypes=[])
        self.assertIs(validate_restaurant(record), record)

    def test_valid_record_passes(self):
        record = _restaurant(serviceTypes=["takeout", "dine-in"], profiles=[])
        self.assertIs(validate_restaurant(record), record)


if __name__ == "__main__":
    unittest.main()
