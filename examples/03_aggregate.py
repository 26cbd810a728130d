"""
Example 03: Aggregation and Map-Reduce

This example builds an aggregation pipeline with the fluent builder and
runs a map-reduce with functions loaded from a mongo_functions directory.
Set MONGOHQ_URL to point at a running MongoDB.
"""

import tempfile
from pathlib import Path

from doc_query import (
    ConnectionManager,
    Model,
    Repository,
    Settings,
    aggregation,
    field,
)


class Order(Model):
    __collection__ = "orders"

    @classmethod
    def declare_types(cls):
        return {
            "customer": field(str),
            "items": field(str).array(),
            "total": field(float),
        }


def main():
    # Server-side functions live in .js files under DOC_QUERY_FUNCTIONS_DIR
    functions_dir = Path(tempfile.mkdtemp()) / "mongo_functions"
    (functions_dir / "orders").mkdir(parents=True)
    (functions_dir / "orders" / "map_total.js").write_text(
        "function () { emit(this.customer, this.total); }"
    )
    (functions_dir / "orders" / "reduce_sum.js").write_text(
        "function (key, values) { return Array.sum(values); }"
    )
    settings = Settings(functions_dir=functions_dir)
    functions = settings.function_registry()

    with ConnectionManager(settings.connection_config()) as store:
        orders = Repository(store, Order)
        for customer, items, total in [
            ("alice", ["pen", "ink"], 12.5),
            ("bob", ["pen"], 3.0),
            ("alice", ["paper"], 7.25),
        ]:
            orders.save(Order(customer=customer, items=items, total=total))

        print("=== Aggregation ===\n")

        print("1. Revenue per customer:")
        pipeline = (
            aggregation()
            .group({
                "_id": "$customer",
                "revenue": aggregation().sum("total"),
                "orders": aggregation().sum(),
            })
            .sort({"revenue": -1})
        )
        for row in orders.aggregate(pipeline):
            print(f"   {row['_id']}: {row['revenue']} over {row['orders']} orders")
        print()

        print("2. Items sold:")
        pipeline = aggregation().unwind("items").group({
            "_id": "$items",
            "buyers": aggregation().add_to_set("customer"),
        })
        for row in orders.aggregate(pipeline):
            print(f"   {row['_id']}: {row['buyers']}")
        print()

        print("3. Map-reduce revenue:")
        reply = orders.map_reduce(
            functions.get("orders.map_total"), functions.get("orders.reduce_sum")
        )
        if reply:
            for row in reply["results"]:
                print(f"   {row['_id']}: {row['value']}")
        print()

        orders.remove({})


if __name__ == "__main__":
    main()
