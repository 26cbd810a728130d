"""
Example 01: Models and Documents

This example declares models, validates assignments and converts them to
and from raw documents. No database is needed.
"""

from enum import Enum

from bson import ObjectId

from doc_query import Model, ValidationError, field


class Role(Enum):
    ADMIN = "admin"
    MEMBER = "member"


class Address(Model):
    """Embedded-only model: no collection"""

    @classmethod
    def declare_types(cls):
        return {
            "street": field(str),
            "city": field(str),
        }


class User(Model):
    __collection__ = "users"

    @classmethod
    def declare_types(cls):
        return {
            "name": field(str),
            "age": field(int).nullable(),
            "roles": field(Role).array(),
            "address": field(Address),
        }


class Team(Model):
    __collection__ = "teams"

    @classmethod
    def declare_types(cls):
        return {
            "title": field(str),
            "lead": field(User),
            "members": field(User).array(),
        }


def main():
    print("=== Models and Documents ===\n")

    # Build a model
    print("1. Build a user:")
    user = User(name="Alice", roles=[Role.ADMIN], address=Address(city="Oslo"))
    print(f"   {user!r}\n")

    # Validation happens on assignment
    print("2. Assign an invalid value:")
    try:
        user.age = "thirty"
    except ValidationError as e:
        print(f"   Rejected: {e}\n")

    # Serialize
    print("3. Serialize:")
    document = user.document()
    print(f"   {document}\n")

    # Reconstruct
    print("4. Reconstruct:")
    restored = User.from_document(document)
    print(f"   Equal to original: {restored == user}")
    print(f"   Roles: {restored.roles}\n")

    # References serialize as pointers, never as the full document
    print("5. Reference a persisted user:")
    user._id = ObjectId()
    team = Team(title="Core", lead=user.reference(), members=[user.reference()])
    print(f"   {team.document()['lead']}\n")


if __name__ == "__main__":
    main()
