"""
Book Catalogue Validation Demo

This example walks through the main entry points:
1. Types built from plain Python patterns
2. Rules that look at sibling fields and repair values
3. Descriptors compiled by the parser and rendered back
4. Schema inference from sample records
5. Function contracts
"""

from tyshape import (
    Dict, Positive, TyError, contract, describe, determine, guess, ifnotmatch, merge, parse, validate,
)


# ============================================================================
# Plain Patterns
# ============================================================================

Book = Dict({
    "title": str,
    "price": float,
    "tags": [str],
})


def check_books():
    good = {"title": "Told Sad", "price": 12.5, "tags": ["novel"]}
    bad = {"title": 1, "tags": ["novel", 2]}

    print("good book:", Book.test(good))
    error = Book.catch(bad)
    print(f"bad book ({error.count} errors):")
    print(error.message)


# ============================================================================
# Rules
# ============================================================================

Order = Dict({
    "kind": str,
    "quantity": determine(lambda data: data["kind"] == "sale", Positive, 0),
    "note": ifnotmatch(str, ""),
})


def check_orders():
    order = {"kind": "sale", "quantity": 3, "note": None}
    Order.assert_(order)
    print("note repaired to:", repr(order["note"]))

    try:
        Order.assert_({"kind": "gift", "quantity": 3, "note": ""})
    except TyError as error:
        print("gift order:", error.message)


# ============================================================================
# Descriptors
# ============================================================================

CATALOGUE = {
    "__def__": [
        {"name": "book", "def": {"title": "string", "price": "0<->1000", "tags?": "string[]"}},
    ],
    "#books": "every book on the shelf",
    "books": "book[]",
    "owner": "&string",
}


def check_descriptors():
    catalogue = parse(CATALOGUE)
    print("catalogue comments:", catalogue.comments)
    print("valid catalogue:", catalogue.test({"books": [{"title": "a", "price": 10}]}))
    print("described:", describe(catalogue, array_style="suffix"))
    print("validate helper:", validate(["a", "b"], "string[]"))


# ============================================================================
# Inference
# ============================================================================

def infer_schema():
    samples = [
        {"title": "Told Sad", "price": 12.5},
        {"title": "Yellow Sun", "price": None, "isbn": "978"},
    ]
    description = guess(samples[0])
    for sample in samples[1:]:
        description = merge(description, sample)
    print("inferred:", description)


# ============================================================================
# Contracts
# ============================================================================

@contract([float, int], float)
def total(price, count):
    """Price of `count` copies."""
    return price * count


def check_contracts():
    print("total:", total(2.5, 4))
    try:
        total(2.5, "4")
    except TyError as error:
        print("bad call:", error.message)


if __name__ == "__main__":
    check_books()
    check_orders()
    check_descriptors()
    infer_schema()
    check_contracts()
