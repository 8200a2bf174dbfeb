"""
Vector similarity query fields for entities annotated with `@vector`.

    @vector(indexes: [{indexName: "MovieEmbedding", queryName: "similarMovies", embeddingProperty: "embedding"}])

adds one Query field per index, searching by an embedding or, when the index
names an embedding provider, by a phrase:

    similarMovies(after: String, first: Int, vector: [Float!], sort: [MovieVectorSort!], where: MovieVectorWhere): MoviesVectorConnection!
"""

from __future__ import annotations

import logging
from typing import Optional

from ..core.features import Features
from ..core.registry import Argument, FieldConfig, TypeRegistry
from ..model.adapters import ConcreteEntityAdapter
from .resolvers import FieldResolver, ResolverKind
from .scalar_types import ScalarTypes
from .sort_input import SortInputGenerator


logger = logging.getLogger(__name__)


class VectorGenerator:
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

    def vector_fields(self, entity: ConcreteEntityAdapter) -> list[str]:
        """Register the vector types and query fields of an entity; returns the field names added."""
        annotation = entity.annotations.vector
        if annotation is None or not annotation.indexes:
            return []
        names = entity.operations.vector_type_names
        self.registry.get_or_create_input(
            "FloatWhere", {"max": "Float", "min": "Float"}, description="The input for filtering a float"
        )
        self.registry.get_or_create_object(
            names.edge, {"cursor": "String!", "node": f"{entity.name}!", "score": "Float!"}
        )
        self.registry.get_or_create_input(
            names.where,
            {"node": entity.operations.where_input_type_name, "score": "FloatWhere"},
            description=f"The input for filtering a vector query on an index of {entity.name}",
        )
        sort_fields = {"score": self.scalars.sort_direction()}
        node_sort = self.sorts.entity_sort(entity)
        if node_sort is not None:
            sort_fields = {"node": node_sort, **sort_fields}
        self.registry.get_or_create_input(
            names.sort,
            sort_fields,
            description=f"The input for sorting a Vector query on an index of {entity.name}",
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
            args = {"after": Argument(type="String"), "first": Argument(type=first)}
            if index.provider:
                args["phrase"] = Argument(type="String!")
            else:
                args["vector"] = Argument(type="[Float!]")
            args["sort"] = Argument(type=f"[{names.sort}!]")
            args["where"] = Argument(type=names.where)
            self.registry.query.add_fields(
                {
                    index.query_name: FieldConfig(
                        type=f"{names.connection}!",
                        args=args,
                        resolve=FieldResolver(
                            kind=ResolverKind.VECTOR,
                            field=index.query_name,
                            entity=entity.name,
                            extra={
                                "index_name": index.index_name,
                                "embedding_property": index.embedding_property,
                                "provider": index.provider,
                            },
                        ),
                    )
                }
            )
            added.append(index.query_name)
        logger.debug(f"Added {len(added)} vector query field(s) for {entity.name}")
        return added
