"""
Fulltext query fields for entities annotated with `@fulltext`.

    @fulltext(indexes: [{indexName: "MovieTitle", queryName: "moviesByTitle", fields: ["title"]}])

adds one Query field per index, all sharing the entity's index types:

    moviesByTitle(after: String, first: Int, phrase: String!, sort: [MovieIndexSort!], where: MovieIndexWhere): MoviesIndexConnection!
"""

from __future__ import annotations

from typing import Optional

from ..core.features import Features
from ..core.registry import Argument, FieldConfig, TypeRegistry
from ..model.adapters import ConcreteEntityAdapter
from .resolvers import FieldResolver, ResolverKind
from .scalar_types import ScalarTypes
from .sort_input import SortInputGenerator


class FulltextGenerator:
    def __init__(
        self,
        registry: TypeRegistry,
        scalars: ScalarTypes,
        sorts: SortInputGenerator,
        features: Optional[Features] = None,
    ):
        self.registry = registry
        self.scalars = scalars
        self.sorts = sorts
        self.features = features

    def fulltext_fields(self, entity: ConcreteEntityAdapter) -> list[str]:
        """Register the index types and query fields of an entity; returns the field names added."""
        annotation = entity.annotations.fulltext
        if annotation is None or not annotation.indexes:
            return []
        names = entity.operations.fulltext_type_names
        self.registry.get_or_create_input(
            "FloatWhere", {"max": "Float", "min": "Float"}, description="The input for filtering a float"
        )
        self.registry.get_or_create_object(
            names.edge, {"cursor": "String!", "node": f"{entity.name}!", "score": "Float!"}
        )
        self.registry.get_or_create_input(
            names.where,
            {"node": entity.operations.where_input_type_name, "score": "FloatWhere"},
            description=f"The input for filtering a full-text query on an index of {entity.name}",
        )
        sort_fields = {"score": self.scalars.sort_direction()}
        node_sort = self.sorts.entity_sort(entity)
        if node_sort is not None:
            sort_fields = {"node": node_sort, **sort_fields}
        self.registry.get_or_create_input(
            names.sort,
            sort_fields,
            description=f"The input for sorting a Fulltext query on an index of {entity.name}",
        )
        self.registry.get_or_create_object(
            names.connection,
            {
                "edges": f"[{names.edge}!]!",
                "pageInfo": f"{self.scalars.page_info()}!",
                "totalCount": "Int!",
            },
        )

        first = "Int!" if self.features and self.features.limit_required else "Int"
        added = []
        for index in annotation.indexes:
            field_name = index.query_name or entity.operations.fulltext_query_field_name(index.index_name or "")
            self.registry.query.add_fields(
                {
                    field_name: FieldConfig(
                        type=f"{names.connection}!",
                        args={
                            "after": Argument(type="String"),
                            "first": Argument(type=first),
                            "phrase": Argument(type="String!"),
                            "sort": Argument(type=f"[{names.sort}!]"),
                            "where": Argument(type=names.where),
                        },
                        resolve=FieldResolver(
                            kind=ResolverKind.FULLTEXT,
                            field=field_name,
                            entity=entity.name,
                            extra={"index_name": index.index_name, "fields": index.fields},
                        ),
                    )
                }
            )
            added.append(field_name)
        return added
