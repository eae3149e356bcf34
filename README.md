# elasticq

A small Elasticsearch client library with two parts:

* a chainable search DSL that builds query, filter, aggregation, facet,
  sort and highlight bodies as plain Python dictionaries, and
* helpers for index administration, type mappings and snapshots. Each
  helper sends one HTTP request through a `Connection`.

It uses only the standard library.

## Installation

```
pip install elasticq
```

To run the test suite:

```
pip install "elasticq[test]"
pytest
```

## Building searches

Every builder method returns its own object, so calls can be chained.
`to_dict()` returns the JSON-ready body.

```python
from elasticq.search import search
from elasticq.query import query
from elasticq.filter import new_filter, TermExecutionMode
from elasticq.sort import sort

qry = (
    search("oilers")
    .size("25")
    .query(query().fields("name", "*d*", "", ""))
    .filter(new_filter().terms("teams", TermExecutionMode.DEFAULT, "STL"))
    .sort(sort("dob").desc())
)

body = qry.to_dict()
path = qry.url()   # "/oilers/_search"
```

`size`, `from_`, `pretty`, `fields`, `source`, `scroll` and `search_type`
are sent as URL arguments; `type` adds document types to the path.

A `QueryDsl` with both a query and a filter is written as a `"filtered"`
query. `query().all()`, `term`, `search`, `qs`, `multi_match` and
`function_score` set the query part.

### Filters

```python
from elasticq.filter import new_filter, new_geo_field

f = new_filter().and_(
    new_filter().term("test", "asdf"),
    new_filter().range("rangefield", 1, 2, 3, 4, "+08:00"),
)

near = new_filter().geo_distance("100km", new_geo_field("pin.location", 32.3, 23.4))
```

The other filter kinds are `exists`, `missing`, `limit`, `type`, `ids`,
`ids_by_types`, `or_`, `not_` and `geo_distance_range`. `compound_filter`
joins several filters; a leading `"and"` or `"or"` string sets the clause.

### Aggregations

```python
from elasticq.aggregate import aggregate
from elasticq.search import search

by_month = aggregate("articles_over_time").date_histogram("date", "month")
by_month.aggregates(
    aggregate("min_price").min("price"),
    aggregate("cardinality_price").cardinality("price", True, 50),
)

qry = search("github").aggregates(by_month)
```

### Facets and highlighting

```python
from elasticq.facet import facet
from elasticq.highlight import new_highlight, new_highlight_opts
from elasticq.search import search

qry = search("oilers").facet(facet().regex("name", "[jk].*").size("8"))

hl = new_highlight().add_field(
    "body", new_highlight_opts().tags("<em>", "</em>").frag_size(150)
)
qry.highlight(hl)
```

## Talking to a cluster

Requests go through `elasticq.request.Connection`, a dataclass holding
`domain`, `port`, `protocol`, optional basic-auth credentials, a `timeout`
and an optional `request_tracer` callback that receives the method, URL and
body of each request.

A 404 from the server raises `elasticq.request.RecordNotFound`; any other
status above 304 raises `elasticq.request.ResponseError`.

```python
from elasticq.request import Connection
from elasticq.indices import create_index, refresh, indices_exists, delete_index
from elasticq.search import search

conn = Connection(domain="localhost", port="9200")

create_index(conn, "oilers")
refresh(conn, "oilers")

result = search("oilers").search("dave").result(conn)   # decoded JSON dict

if indices_exists(conn, "oilers"):
    delete_index(conn, "oilers")
```

`elasticq.indices` also has `create_index_with_settings`, `put_settings`,
`delete_mapping`, `flush`, `clear_cache`, `optimize_indices`, `status`,
`snapshot`, `open_index`, `close_index`, `open_indices` and
`close_indices`.

### Mappings

`elasticq.mapping.put_mapping` builds the mapping properties from a
dataclass. Field metadata holds the JSON name (`"json"`, `"-"` skips the
field), mapping attributes (`"elastic"`) and whether a nested dataclass is
merged into its parent (`"embedded"`):

```python
from dataclasses import dataclass, field
from elasticq.mapping import MappingOptions, TimestampOptions, put_mapping

@dataclass
class Player:
    id: str = field(default="", metadata={"json": "id", "elastic": "index:not_analyzed"})
    number: int = field(default=0, metadata={"json": "number", "elastic": "type:integer"})

put_mapping(conn, "oilers", "player", Player, MappingOptions(timestamp=TimestampOptions(True)))
```

`put_mapping_from_json` sends a mapping given as raw JSON, and
`mapping_for_type` / `mapping_options` build and read `{type: options}`
mappings.

### Snapshots

`elasticq.snapshots` has `create_snapshot_repository`, `take_snapshot`,
`restore_snapshot`, `get_snapshots` and `get_snapshot_by_name`; the last two
return a `GetSnapshotsResponse` of `SnapshotInfo` entries with parsed
start and end times.

### Query-string arguments

`elasticq.request.escape` encodes URL arguments in sorted key order. It
accepts strings, booleans, integers, floats and lists of strings, and raises
`TypeError` for anything else:

```python
from elasticq.request import escape

escape({"foo": "bar", "test": ["a", "b"]})   # "foo=bar&test=a%2Cb"
```

## What it does not do

The package has no calls for indexing, fetching, updating or deleting
single documents, no bulk indexer, and no raw-JSON search call; searches
are sent through `SearchDsl`. It talks to one node only, with no host pool
or failover, and it has no command-line tool.