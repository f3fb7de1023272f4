import json
import unittest

from pyvalq.core.message_bag import MessageBag


class TestMessageBag(unittest.TestCase):

    def test_uniqueness(self):
        bag = MessageBag()
        bag.add("foo", "bar")
        bag.add("foo", "bar")
        self.assertEqual(bag.get_messages()["foo"], ["bar"])

    def test_same_text_on_different_keys_is_kept(self):
        bag = MessageBag()
        bag.add("foo", "bar").add("baz", "bar")
        self.assertEqual(bag.all(), ["bar", "bar"])

    def test_insertion_order(self):
        bag = MessageBag()
        bag.add("foo", "second").add("foo", "first").add("foo", "second")
        self.assertEqual(bag.get("foo"), ["second", "first"])

    def test_first(self):
        bag = MessageBag({"foo": ["bar", "baz"], "boom": ["bust"]})
        self.assertEqual(bag.first("foo"), "bar")
        self.assertEqual(bag.first(), "bar")
        self.assertEqual(bag.first("missing"), "")

    def test_format(self):
        bag = MessageBag({"foo": ["bar"]})
        self.assertEqual(bag.get("foo", "<p>:message</p>"), ["<p>bar</p>"])
        self.assertEqual(bag.first("foo", ":key: :message"), "foo: bar")
        bag.set_format("[:message]")
        self.assertEqual(bag.all(), ["[bar]"])

    def test_has_and_keys(self):
        bag = MessageBag()
        self.assertFalse(bag.has("foo"))
        bag.add("foo", "bar")
        self.assertTrue(bag.has("foo"))
        self.assertIn("foo", bag)
        self.assertEqual(bag.keys(), ["foo"])

    def test_counts(self):
        bag = MessageBag()
        self.assertTrue(bag.is_empty())
        self.assertFalse(bag.any())
        bag.add("foo", "bar").add("foo", "baz").add("boom", "bust")
        self.assertEqual(bag.count(), 3)
        self.assertEqual(len(bag), 3)
        self.assertTrue(bag.any())

    def test_merge(self):
        bag = MessageBag({"foo": ["bar"]})
        bag.merge(MessageBag({"foo": ["bar", "baz"]}))
        self.assertEqual(bag.get("foo"), ["bar", "baz"])

    def test_get_messages_is_a_copy(self):
        bag = MessageBag({"foo": ["bar"]})
        bag.get_messages()["foo"].append("baz")
        self.assertEqual(bag.get("foo"), ["bar"])

    def test_to_json(self):
        bag = MessageBag({"foo": ["bar"]})
        self.assertEqual(json.loads(bag.to_json()), {"foo": ["bar"]})


if __name__ == '__main__':
    unittest.main()
