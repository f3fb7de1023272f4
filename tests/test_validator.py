import unittest
from unittest.mock import MagicMock

from pyvalq.core.base_rule import BaseRule
from pyvalq.core.exceptions import ConfigurationError, RuleParseError
from pyvalq.core.validator import Validator
from pyvalq.utils.files import UploadedFile
from pyvalq.utils.translator import ArrayTranslator, Translator


def make(data, rules, lines=None, messages=None):
    return Validator(ArrayTranslator(lines), data, rules, messages)


class EvenRule(BaseRule):
    description = "The value must be an even number."

    def passes(self, attribute, value, parameters, context):
        return int(value) % 2 == 0


class TestValidatorMessages(unittest.TestCase):

    def test_rules_on_missing_attributes_are_not_evaluated(self):
        trans = MagicMock(spec=Translator)
        v = Validator(trans, {"foo": "taylor"}, {"name": "Confirmed"})
        self.assertTrue(v.passes())
        trans.translate.assert_not_called()

    def test_proper_language_line_is_set(self):
        v = make({"name": ""}, {"name": "Required"}, {"validation.required": "required!"})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("name"), "required!")

    def test_attribute_name_is_replaced(self):
        v = make({"name": ""}, {"name": "required"}, {"validation.required": ":attribute is required!"})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("name"), "name is required!")

    def test_attribute_label_from_translator(self):
        lines = {"validation.required": ":attribute is required!", "validation.attributes.name": "Full Name"}
        v = make({"name": ""}, {"name": "required"}, lines)
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("name"), "Full Name is required!")

    def test_attribute_label_defaults_to_spaced_name(self):
        v = make({}, {"first_name": "required"}, {"validation.required": ":attribute is required!"})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("first_name"), "first name is required!")

    def test_attribute_specific_line_is_respected(self):
        lines = {"validation.required": "required!", "validation.name.required": "really required!"}
        v = make({"name": ""}, {"name": "required"}, lines)
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("name"), "really required!")

    def test_inline_messages_take_precedence_over_translator(self):
        lines = {"validation.name.required": "translated"}
        v = make({"name": ""}, {"name": "required"}, lines, {"name.required": "inline"})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("name"), "inline")

    def test_inline_generic_line(self):
        v = make({"name": ""}, {"name": "required"}, messages={"required": ":attribute needed"})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("name"), "name needed")

    def test_missing_line_falls_back_to_key(self):
        v = make({"name": ""}, {"name": "required"})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("name"), "validation.required")

    def test_size_message_for_numeric_values(self):
        lines = {
            "validation.between.numeric": ":attribute must be between :min and :max.",
            "validation.between.string": ":attribute must be between :min and :max characters.",
        }
        v = make({"age": "200"}, {"age": "numeric|between:1,100"}, lines)
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("age"), "age must be between 1 and 100.")

    def test_size_message_for_strings(self):
        lines = {
            "validation.between.numeric": ":attribute must be between :min and :max.",
            "validation.between.string": ":attribute must be between :min and :max characters.",
        }
        v = make({"name": "ab"}, {"name": "between:3,5"}, lines)
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("name"), "name must be between 3 and 5 characters.")

    def test_size_message_for_files(self):
        lines = {"validation.max.file": ":attribute may not be greater than :max kilobytes."}
        v = make({}, {"photo": "max:5"}, lines)
        v.set_files({"photo": UploadedFile("photo.png", size=10 * 1024)})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("photo"), "photo may not be greater than 5 kilobytes.")

    def test_size_line_without_type_variant_uses_generic_line(self):
        v = make({"name": "ab"}, {"name": "min:3"}, {"validation.min": "too short"})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("name"), "too short")

    def test_values_placeholder(self):
        v = make({"state": "gone"}, {"state": "in:draft,live"}, {"validation.in": ":attribute must be one of :values."})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("state"), "state must be one of draft, live.")

    def test_other_placeholder_uses_label(self):
        lines = {"validation.same": ":attribute and :other must match.", "validation.attributes.password_again": "Repeat"}
        v = make({"password": "a", "password_again": "b"}, {"password": "same:password_again"}, lines)
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("password"), "password and Repeat must match.")

    def test_date_placeholder(self):
        v = make({"start": "2021-01-01"}, {"start": "before:2020-01-01"}, {"validation.before": "before :date"})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("start"), "before 2020-01-01")

    def test_size_placeholder_for_numbers_and_strings(self):
        translator = ArrayTranslator.with_defaults()
        v = Validator(translator, {"n": "4", "code": "ab"}, {"n": "numeric|size:3", "code": "size:3"})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("n"), "The n must be 3.")
        self.assertEqual(v.errors.first("code"), "The code must be 3 characters.")

    def test_max_placeholder_for_numbers_and_strings(self):
        translator = ArrayTranslator.with_defaults()
        v = Validator(translator, {"n": "11", "name": "abcd"}, {"n": "integer|max:10", "name": "max:3"})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("n"), "The n may not be greater than 10.")
        self.assertEqual(v.errors.first("name"), "The name may not be greater than 3 characters.")

    def test_attribute_named_like_a_size_rule_keeps_its_own_line(self):
        translator = ArrayTranslator.with_defaults()
        for attribute in ("max", "min", "size", "between"):
            with self.subTest(attribute=attribute):
                v = Validator(translator, {attribute: "abc"}, {attribute: "numeric"})
                self.assertTrue(v.fails())
                self.assertEqual(v.errors.first(attribute), f"The {attribute} must be a number.")

    def test_rule_object_extension_uses_registered_name_for_lines(self):
        v = make({"n": "3"}, {"n": "even"}, {"validation.even": ":attribute is not even"})
        v.add_extension("even", EvenRule())
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("n"), "n is not even")

        passing = make({"n": "4"}, {"n": "even"})
        passing.add_extension("even", EvenRule())
        self.assertTrue(passing.passes())

    def test_default_english_lines(self):
        v = Validator(ArrayTranslator.with_defaults(), {"name": "", "age": "17"}, {"name": "required", "age": "numeric|min:18"})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("name"), "The name field is required.")
        self.assertEqual(v.errors.first("age"), "The age must be at least 18.")


class TestValidatorBehaviour(unittest.TestCase):

    def test_every_failure_is_collected(self):
        v = make({"name": "", "age": "abc"}, {"name": "required", "age": "numeric|min:5"})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.get("name"), ["validation.required"])
        self.assertEqual(v.errors.get("age"), ["validation.numeric", "validation.min"])
        self.assertEqual(v.errors.count(), 3)

    def test_duplicate_messages_are_collapsed(self):
        v = make({"code": "!!"}, {"code": "alpha|alpha_num"}, messages={"alpha": "bad", "alpha_num": "bad"})
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.get("code"), ["bad"])

    def test_passes_and_fails_are_consistent(self):
        v = make({"name": "taylor"}, {"name": "required|alpha"})
        self.assertTrue(v.passes())
        self.assertFalse(v.fails())
        self.assertTrue(v.errors.is_empty())

    def test_errors_runs_a_pass_lazily(self):
        v = make({"name": ""}, {"name": "required"})
        self.assertEqual(v.messages().get("name"), ["validation.required"])

    def test_rules_may_be_lists(self):
        v = make({"name": "ab"}, {"name": ["required", "min:3"]})
        self.assertTrue(v.fails())
        self.assertTrue(v.errors.has("name"))

    def test_get_rules_returns_tokens(self):
        v = make({}, {"name": "required|min:3", "age": ["numeric"]})
        self.assertEqual(v.get_rules(), {"name": ["required", "min:3"], "age": ["numeric"]})

    def test_get_data(self):
        v = make({"name": "taylor"}, {})
        self.assertEqual(v.get_data(), {"name": "taylor"})

    def test_unknown_rule_raises(self):
        v = make({"name": "taylor"}, {"name": "bogus"})
        with self.assertRaises(ConfigurationError):
            v.validate()

    def test_unknown_rule_on_missing_value_is_not_resolved(self):
        self.assertTrue(make({}, {"name": "bogus"}).passes())

    def test_malformed_rule_raises_on_construction(self):
        with self.assertRaises(RuleParseError):
            make({}, {"state": 'in:"open'})

    def test_missing_parameters_raise(self):
        with self.assertRaises(ConfigurationError):
            make({"name": "abc"}, {"name": "between:3"}).validate()

    def test_non_numeric_size_parameter_raises(self):
        with self.assertRaises(ConfigurationError):
            make({"name": "abc"}, {"name": "size:abc"}).validate()

    def test_presence_rules_need_a_verifier(self):
        with self.assertRaises(ConfigurationError):
            make({"email": "a@b.com"}, {"email": "unique:users"}).validate()

    def test_set_files_after_validation_raises(self):
        v = make({}, {"photo": "required"})
        v.validate()
        with self.assertRaises(ConfigurationError):
            v.set_files({"photo": UploadedFile("photo.png")})

    def test_files_are_validated_when_data_lacks_the_attribute(self):
        v = make({}, {"photo": "required|image"})
        v.set_files({"photo": UploadedFile("photo.png", size=100)})
        self.assertTrue(v.passes())
        self.assertIn("photo", v.get_files())

    def test_extension(self):
        v = make({"name": "taylor"}, {"name": "foo"})
        v.add_extension("foo", lambda attribute, value, parameters, context: False)
        self.assertTrue(v.fails())
        self.assertEqual(v.errors.first("name"), "validation.foo")

    def test_extension_receives_arguments(self):
        calls = []

        def recorder(attribute, value, parameters, context):
            calls.append((attribute, value, tuple(parameters), context.get_value("other")))
            return True

        v = make({"name": "taylor", "other": 1}, {"name": "recorder:a,b"})
        v.add_extensions({"recorder": recorder})
        self.assertTrue(v.passes())
        self.assertEqual(calls, [("name", "taylor", ("a", "b"), 1)])

    def test_extension_overrides_builtin(self):
        v = make({"n": "abc"}, {"n": "numeric"})
        v.add_extension("numeric", lambda *args: True)
        self.assertTrue(v.passes())
        self.assertIn("Numeric", v.get_extensions())

    def test_extensions_are_local_to_the_validator(self):
        first = make({"name": "x"}, {"name": "foo"})
        first.add_extension("foo", lambda *args: True)
        second = make({"name": "x"}, {"name": "foo"})
        with self.assertRaises(ConfigurationError):
            second.validate()

    def test_translator_accessors(self):
        v = make({}, {})
        translator = ArrayTranslator()
        v.set_translator(translator)
        self.assertIs(v.get_translator(), translator)


class TestRequiredAndAccepted(unittest.TestCase):

    def test_required_fails(self):
        for data in ({}, {"name": None}, {"name": ""}, {"name": "   "}):
            with self.subTest(data=data):
                self.assertTrue(make(data, {"name": "required"}).fails())

    def test_required_fails_for_empty_file(self):
        v = make({}, {"photo": "required"})
        v.set_files({"photo": UploadedFile("")})
        self.assertTrue(v.fails())

    def test_required_passes(self):
        for value in ("foo", "0", 0, False, ["a"]):
            with self.subTest(value=value):
                self.assertTrue(make({"name": value}, {"name": "required"}).passes())

    def test_accepted(self):
        self.assertTrue(make({}, {"terms": "accepted"}).fails())
        self.assertTrue(make({"terms": "no"}, {"terms": "accepted"}).fails())
        self.assertTrue(make({"terms": "true"}, {"terms": "accepted"}).fails())
        self.assertTrue(make({"terms": "yes"}, {"terms": "accepted"}).passes())
        self.assertTrue(make({"terms": "1"}, {"terms": "accepted"}).passes())
        self.assertTrue(make({"terms": 1}, {"terms": "accepted"}).passes())


class TestSizeRules(unittest.TestCase):

    def test_between_on_strings(self):
        self.assertTrue(make({"name": "ab"}, {"name": "between:3,5"}).fails())
        self.assertTrue(make({"name": "abc"}, {"name": "between:3,5"}).passes())
        self.assertTrue(make({"name": "abcde"}, {"name": "between:3,5"}).passes())
        self.assertTrue(make({"name": "abcdef"}, {"name": "between:3,5"}).fails())

    def test_between_on_numbers(self):
        self.assertTrue(make({"n": "75"}, {"n": "numeric|between:50,100"}).passes())
        self.assertTrue(make({"n": "150"}, {"n": "numeric|between:50,100"}).fails())
        self.assertTrue(make({"n": "49"}, {"n": "numeric|between:50,100"}).fails())

    def test_numbers_without_numeric_rule_are_measured_as_text(self):
        self.assertTrue(make({"n": "75"}, {"n": "between:50,100"}).fails())

    def test_size(self):
        self.assertTrue(make({"n": "3"}, {"n": "numeric|size:3"}).passes())
        self.assertTrue(make({"n": "123"}, {"n": "size:3"}).passes())
        self.assertTrue(make({"n": "3"}, {"n": "size:3"}).fails())

    def test_integer_rule_makes_size_numeric(self):
        self.assertTrue(make({"n": "10"}, {"n": "integer|max:9"}).fails())
        self.assertTrue(make({"n": "10"}, {"n": "integer|max:10"}).passes())

    def test_min_and_max(self):
        self.assertTrue(make({"name": "ab"}, {"name": "min:3"}).fails())
        self.assertTrue(make({"name": "abc"}, {"name": "min:3"}).passes())
        self.assertTrue(make({"name": "abcd"}, {"name": "max:3"}).fails())
        self.assertTrue(make({"n": "2.5"}, {"n": "numeric|min:2.5"}).passes())

    def test_list_size_is_element_count(self):
        self.assertTrue(make({"tags": ["a", "b", "c"]}, {"tags": "max:2"}).fails())
        self.assertTrue(make({"tags": ["a", "b"]}, {"tags": "size:2"}).passes())

    def test_whole_floats_are_measured_as_rendered(self):
        self.assertTrue(make({"n": 3.0}, {"n": "size:1"}).passes())
        self.assertTrue(make({"n": 2.5}, {"n": "size:3"}).passes())

    def test_file_size_is_in_kilobytes(self):
        v = make({}, {"doc": "size:2"})
        v.set_files({"doc": UploadedFile("doc.txt", size=2048)})
        self.assertTrue(v.passes())

        v = make({}, {"doc": "between:1,2"})
        v.set_files({"doc": UploadedFile("doc.txt", size=4096)})
        self.assertTrue(v.fails())


class TestConfirmed(unittest.TestCase):

    def test_confirmed(self):
        self.assertTrue(make({"password": "foo"}, {"password": "confirmed"}).fails())
        self.assertTrue(make({"password": "foo", "password_confirmation": "bar"}, {"password": "confirmed"}).fails())
        self.assertTrue(make({"password": "foo", "password_confirmation": "foo"}, {"password": "confirmed"}).passes())


if __name__ == '__main__':
    unittest.main()
