# taskmill:header:start
#
#   project      : TaskMill
#   file         : test_attribute_resolution.py
#   file_relpath : tests/attributes/test_attribute_resolution.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Attribute resolution: sources, requirements, defaults, conversion and nesting.

Each test declares a small task and inspects the finalized `Result` (and the
values the routine saw) rather than calling the resolver directly.
"""

from __future__ import annotations

from typing import Any

from taskmill import Context, Status, Task, optional, required
from taskmill.status import State


class CreateProfile(Task):
    age = required(type="integer")

    def work(self) -> None:
        self.context.saved_age = self.age


class TagPost(Task):
    tags = optional(type="array", default=[])

    def work(self) -> None:
        self.context.seen_tags = self.tags


def test_uncoercible_integer_fails_with_invalid_reason() -> None:
    """A required integer given ``"30x"`` fails the invocation with one message."""
    result = CreateProfile.execute(age="30x")

    assert result.status is Status.FAILED
    assert result.state is State.INTERRUPTED
    assert result.reason == "Invalid"
    assert result.metadata["errors"]["messages"] == {"age": ["could not coerce into an integer"]}
    assert result.metadata["errors"]["full_message"] == "age could not coerce into an integer"
    assert "saved_age" not in result.context


def test_coercible_integer_reaches_the_routine() -> None:
    result = CreateProfile.execute(age="30")

    assert result.status is Status.SUCCESS
    assert result.context.saved_age == 30


def test_optional_array_defaults_to_empty_list() -> None:
    """An absent optional ``tags`` with default ``[]`` resolves to an empty list."""
    result = TagPost.execute()

    assert result.status is Status.SUCCESS
    assert result.context.seen_tags == []


def test_mutable_default_is_not_shared_between_invocations() -> None:
    class AppendTag(Task):
        tags = optional(type="array", default=[])

        def work(self) -> None:
            self.tags.append("x")
            self.context.seen_tags = self.tags

    first = AppendTag.execute()
    second = AppendTag.execute()

    assert first.context.seen_tags == ["x"]
    assert second.context.seen_tags == ["x"]


def test_two_invalid_attributes_are_reported_together() -> None:
    class Register(Task):
        email = required(type="string", format=r"@")
        age = required(type="integer")

        def work(self) -> None:
            pass

    both = Register.execute(email="nope", age="old")
    messages: dict[str, list[str]] = both.metadata["errors"]["messages"]
    assert set(messages) == {"email", "age"}
    assert all(messages[key] for key in messages)

    one = Register.execute(email="a@b.c", age="old")
    assert set(one.metadata["errors"]["messages"]) == {"age"}


def test_required_none_and_missing_are_both_absent() -> None:
    class NeedsName(Task):
        name = required()

        def work(self) -> None:
            pass

    for data in ({}, {"name": None}):
        result = NeedsName.execute(data)
        assert result.metadata["errors"]["messages"] == {"name": ["is required"]}

    # an empty string is a value; presence validation is separate
    assert NeedsName.execute(name="").status is Status.SUCCESS


def test_optional_without_default_binds_none() -> None:
    class MaybeNote(Task):
        note = optional(type="string")

        def work(self) -> None:
            self.context.note_seen = self.note

    result = MaybeNote.execute()
    assert result.status is Status.SUCCESS
    assert result.context.note_seen is None


def test_fallback_types_use_first_successful_converter() -> None:
    class Amount(Task):
        value = required(types=("integer", "float"))

        def work(self) -> None:
            self.context.converted = self.value

    assert Amount.execute(value="12").context.converted == 12
    assert Amount.execute(value="12.5").context.converted == 12.5

    failed = Amount.execute(value="twelve")
    assert failed.metadata["errors"]["messages"] == {"value": ["could not coerce into one of: integer, float"]}


def test_default_is_converted_transformed_and_validated() -> None:
    class Currency(Task):
        code = optional(type="string", default="eur", transform="upper", length={"is": 3})
        bad = optional(type="string", default="toolong", length={"max": 3})

        def work(self) -> None:
            self.context.code_seen = self.code

    result = Currency.execute()
    assert result.metadata["errors"]["messages"] == {"bad": ["length must be at most 3"]}
    assert Currency.execute(bad="ok").context.code_seen == "EUR"


def test_callable_and_named_defaults_run_against_the_task() -> None:
    class Scheduled(Task):
        region = optional(default=lambda task: "eu" if task.context.get("europe") else "us")
        limit = optional(type="integer", default="default_limit")

        def default_limit(self) -> int:
            return 25

        def work(self) -> None:
            self.context.summary = (self.region, self.limit)

    assert Scheduled.execute(europe=True).context.summary == ("eu", 25)
    assert Scheduled.execute().context.summary == ("us", 25)


def test_sources_named_routine_callable_and_other_attribute() -> None:
    class Checkout(Task):
        user = required(type="hash")
        user_id = required(source="user", as_="owner_id", type="integer")
        plan = required(source="account")
        coupon = optional(source=lambda task: {"coupon": "SAVE10"})

        def account(self) -> dict[str, Any]:
            return {"plan": "pro"}

        def work(self) -> None:
            self.context.summary = (self.owner_id, self.plan, self.coupon)

    result = Checkout.execute(user={"user_id": "7"})
    assert result.status is Status.SUCCESS
    assert result.context.summary == (7, "pro", "SAVE10")


def test_undefined_source_routine_is_reported() -> None:
    class Broken(Task):
        value = required(source="no_such_routine")

        def work(self) -> None:
            pass

    result = Broken.execute()
    assert result.metadata["errors"]["messages"] == {"value": ["delegates to undefined method no_such_routine"]}


def test_unresolved_attribute_source_is_absent() -> None:
    class Shipping(Task):
        address = optional(type="hash")
        city = optional(source="address")

        def work(self) -> None:
            self.context.city_seen = self.city

    assert Shipping.execute().context.city_seen is None
    assert Shipping.execute(address={"city": "Ghent"}).context.city_seen == "Ghent"


def test_conditional_requirement_with_guards() -> None:
    class Invoice(Task):
        company = optional(type="boolean", default=False)
        vat_number = required(if_="company")
        reference = required(unless=lambda task: task.context.get("internal"))

        def work(self) -> None:
            pass

    assert Invoice.execute(reference="r1").status is Status.SUCCESS
    needs_vat = Invoice.execute(company="yes", reference="r1")
    assert needs_vat.metadata["errors"]["messages"] == {"vat_number": ["is required"]}
    assert Invoice.execute(internal=True).status is Status.SUCCESS


def test_callable_required_flag() -> None:
    class Flexible(Task):
        token = required(required=lambda task: bool(task.context.get("strict")))

        def work(self) -> None:
            pass

    assert Flexible.execute().status is Status.SUCCESS
    assert Flexible.execute(strict=True).status is Status.FAILED


def test_optional_parent_absent_skips_required_children() -> None:
    class Ship(Task):
        address = optional(
            type="hash",
            children=[required("street"), required("city")],
        )

        def work(self) -> None:
            pass

    assert Ship.execute().status is Status.SUCCESS

    result = Ship.execute(address={"street": "Main 1"})
    assert result.metadata["errors"]["messages"] == {"address.city": ["is required"]}


def test_sibling_child_failures_are_all_reported() -> None:
    class Ship(Task):
        address = required(
            type="hash",
            children=[required("street"), required("city"), optional("zip", type="integer")],
        )

        def work(self) -> None:
            pass

    result = Ship.execute(address={"zip": "abc"})
    assert result.metadata["errors"]["messages"] == {
        "address.street": ["is required"],
        "address.city": ["is required"],
        "address.zip": ["could not coerce into an integer"],
    }


def test_nested_accessors_and_prefix_suffix_naming() -> None:
    class Profile(Task):
        preferences = required(
            type="hash",
            children=[optional("theme", prefix=True, default="light")],
        )
        name = required(suffix="_text")
        lang = optional(source="locale_info", prefix=True)

        def locale_info(self) -> dict[str, str]:
            return {"lang": "nl"}

        def work(self) -> None:
            self.context.seen = (self.preferences_theme, self.name_text, self.locale_info_lang)

    result = Profile.execute(preferences={}, name="Ada")
    assert result.status is Status.SUCCESS
    assert result.context.seen == ("light", "Ada", "nl")


def test_nested_child_renamed_with_as_reads_its_input_name() -> None:
    class Deliver(Task):
        address = required(type="hash", children=[required("city", as_="town")])

        def work(self) -> None:
            self.context.town = self.town

    result = Deliver.execute(address={"city": "Ghent"})
    assert result.status is Status.SUCCESS
    assert result.context.town == "Ghent"

    missing = Deliver.execute(address={"town": "Ghent"})
    assert missing.metadata["errors"]["messages"] == {"address.town": ["is required"]}


def test_attribute_several_names_share_options() -> None:
    class Person(Task):
        names = required("first_name", "last_name", type="string", presence=True)

        def work(self) -> None:
            self.context.full = f"{self.first_name} {self.last_name}"

    assert not hasattr(Person, "names")
    assert Person.execute(first_name="Ada", last_name="Lovelace").context.full == "Ada Lovelace"
    missing = Person.execute(first_name="Ada", last_name=" ")
    assert missing.metadata["errors"]["messages"] == {"last_name": ["cannot be empty"]}


def test_resolved_value_is_memoized_per_invocation() -> None:
    calls: list[int] = []

    class Counted(Task):
        value = required(source=lambda task: calls.append(1) or {"value": object()})

        def work(self) -> None:
            self.context.same = self.value is self.value

    result = Counted.execute()
    assert result.context.same is True
    assert len(calls) == 1


def test_transform_callable_and_validation_rule_guards() -> None:
    class Slug(Task):
        slug = required(
            type="string",
            transform=lambda value: value.strip().lower(),
            format={"with": r"^[a-z-]+$", "unless": lambda task, value: task.context.get("lenient")},
            length={"min": 3, "allow_nil": True},
        )

        def work(self) -> None:
            self.context.slug_seen = self.slug

    assert Slug.execute(slug="  Hello-World ").context.slug_seen == "hello-world"
    assert Slug.execute(slug="a b c").status is Status.FAILED
    assert Slug.execute(slug="a b c", lenient=True).status is Status.SUCCESS


def test_existing_context_is_shared_by_reference() -> None:
    store = Context(age="41")
    result = CreateProfile.execute(store)

    assert result.context is store
    assert store.saved_age == 41
