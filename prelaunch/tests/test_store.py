import threading
import unittest
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from prelaunch.store import InMemorySubscriptionStore


class InMemorySubscriptionStoreTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemorySubscriptionStore()

    def test_create_and_get_subscription(self):
        before = datetime.now(timezone.utc)
        record = self.store.create_subscription("user@example.com")
        self.assertEqual(record.email, "user@example.com")
        self.assertGreaterEqual(record.subscribed_at, before)
        self.assertEqual(self.store.get_subscription("user@example.com"), record)

    def test_lookup_is_exact(self):
        self.store.create_subscription("user@example.com")
        self.assertIsNone(self.store.get_subscription("USER@example.com"))
        self.assertIsNone(self.store.get_subscription(" user@example.com"))

    def test_create_subscription_overwrites(self):
        first = self.store.create_subscription("user@example.com")
        second = self.store.create_subscription("user@example.com")
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(self.store.get_subscription("user@example.com").id, second.id)
        self.assertEqual(len(self.store.list_subscriptions()), 1)

    def test_add_subscription_keeps_existing(self):
        first, created = self.store.add_subscription("user@example.com")
        self.assertTrue(created)
        again, created_again = self.store.add_subscription("user@example.com")
        self.assertFalse(created_again)
        self.assertIs(again, first)
        self.assertEqual(len(self.store.list_subscriptions()), 1)

    def test_concurrent_add_creates_one_record(self):
        barrier = threading.Barrier(8)

        def add():
            barrier.wait()
            return self.store.add_subscription("race@example.com")

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: add(), range(8)))

        self.assertEqual(sum(1 for _, created in results if created), 1)
        self.assertEqual(len({record.id for record, _ in results}), 1)
        self.assertEqual(len(self.store.list_subscriptions()), 1)

    def test_list_subscriptions(self):
        emails = ["a@example.com", "b@example.com", "c@example.com"]
        for email in emails:
            self.store.add_subscription(email)
        listed = self.store.list_subscriptions()
        self.assertEqual([r.email for r in listed], emails)
        self.assertEqual(self.store.list_subscriptions(), listed)

    def test_accounts(self):
        account = self.store.create_account("ana", "secret")
        self.assertEqual(self.store.get_account(account.id), account)
        self.assertEqual(self.store.get_account_by_username("ana"), account)
        self.assertIsNone(self.store.get_account("missing"))
        self.assertIsNone(self.store.get_account_by_username("luis"))

    def test_duplicate_usernames_resolve_to_first(self):
        first = self.store.create_account("ana", "one")
        second = self.store.create_account("ana", "two")
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(self.store.get_account_by_username("ana").id, first.id)
        self.assertEqual(self.store.get_account(second.id).password, "two")

    def test_reset(self):
        self.store.create_account("ana", "secret")
        self.store.add_subscription("user@example.com")
        self.store.reset()
        self.assertEqual(self.store.list_subscriptions(), [])
        self.assertIsNone(self.store.get_account_by_username("ana"))


if __name__ == "__main__":
    unittest.main()
