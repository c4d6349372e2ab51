# itemshop

A small set of shop services (auth, player, item, inventory, payment) that
share one code base. Each process reads a `.env` file, connects to MongoDB
and serves the service named by `APP_NAME` over HTTP.

## Installation

```
pip install .
```

## Configuration

Every command takes the path to a `.env` file as its first argument. The
file is read with `itemshop.config.load_config`, which returns a frozen
`Config` made of `AppConfig`, `DbConfig`, `JwtConfig`, `KafkaConfig`,
`GrpcConfig` and `PaginateConfig`. Variables already set in the
environment take precedence over those in the file. These keys are read:

| Key | Meaning |
| --- | --- |
| `APP_NAME` | Service to run: `auth`, `player`, `item`, `inventory` or `payment` |
| `APP_URL` | Address to listen on, as `host:port`, for example `0.0.0.0:1421` |
| `APP_STAGE` | Deployment stage label |
| `DB_URL` | MongoDB connection string |
| `JWT_ACCESS_SECRET_KEY`, `JWT_REFRESH_SECRET_KEY`, `JWT_API_SECRET_KEY` | Token secrets |
| `JWT_ACCESS_DURATION`, `JWT_REFRESH_DURATION` | Token lifetimes; required, must be 64-bit integers |
| `KAFKA_URL`, `KAFKA_API_KEY`, `KAFKA_API_SECRET` | Queue settings |
| `GRPC_AUTH_URL`, `GRPC_PLAYER_URL`, `GRPC_ITEM_URL`, `GRPC_INVENTORY_URL`, `GRPC_PAYMENT_URL` | Internal service addresses |
| `PAGINATE_ITEM_NEXT_PAGE_BASED_URL`, `PAGINATE_INVENTORY_NEXT_PAGE_BASED_URL` | Base links for paginated results |

A missing file or a duration that is not an integer raises
`itemshop.config.ConfigError`.

## Seeding the database

```
itemshop-migrate env/dev/.env.item
```

This connects to `DB_URL`, creates the indexes and inserts the seed
documents for the service named by `APP_NAME`: the `player` and `admin`
roles for `auth`, three swords for `item`, four sample players with an
opening transaction of 1000 each and a queue offset document for
`player`, and queue offset documents (`{"offset": -1}`) for `inventory`
and `payment`. Any other `APP_NAME` does nothing. The functions behind it
(`auth_migrate`, `item_migrate`, `player_migrate`, `inventory_migrate`,
`payment_migrate`, `migrate`) live in `itemshop.migration` and take a
`pymongo` client.

## Running a service

```
itemshop env/dev/.env.item
```

The process checks that MongoDB answers a ping (raising
`itemshop.database.DatabaseError` inside `db_conn` if not) and then serves
a health check at the service's prefix, for example `GET /item_v1`:

```json
{"app": "item", "status": "OK"}
```

Requests that take longer than 30 seconds are answered with status 503
and the text `Error: request timeout`; request bodies over 10 MiB get 413;
CORS allows any origin for GET, HEAD, PUT, PATCH, POST and DELETE. HTTP
errors are returned as `{"message": ...}`. `SIGINT` or `SIGTERM` stops the
listener.

## Using it as a library

```python
from itemshop.config import load_config
from itemshop.database import db_conn
from itemshop.server import create_app

config = load_config("env/dev/.env.item")
client = db_conn(config)
app = create_app(config, client)
```

`itemshop.server.Server` gives access to the listener itself through
`serve()` and `shutdown()`.

Request payloads can be turned into one of the models in
`itemshop.models` or `itemshop.accounts` with `itemshop.request.bind`,
which builds the model from a mapping (using each field's JSON name) and
logs, rather than raises, any binding or validation problem.
`itemshop.request.validate` checks a model against its field rules
(`required`, `email`, `min`, `max`) and raises
`itemshop.request.ValidationError` listing every broken rule.

## What it does not do

Apart from the health check, no service exposes HTTP endpoints: the
handlers built by `itemshop.services.build_service` hold only their
configuration and use case. There are no internal RPC servers, no queue
consumers and no token issuing or checking, even though the configuration
carries settings for them.

## Tests

```
pip install .[test]
pytest
```