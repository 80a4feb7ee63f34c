# rpcgate

Building blocks for an HTTP gateway in front of RPC services. The pieces
are plain WSGI, so they can wrap any WSGI application. Their shared state
is kept in Redis.

## What is in it

- `rpcgate.ratelimit.TokenBucket` is a token bucket kept in Redis under
  `<key>:tokens` and `<key>:last_time`. The default key is `token_bucket`,
  and both values expire after 24 hours. Each call to `get_tokens()` adds
  `rate` tokens for every whole second that has passed, up to `capacity`.
  `allow()` takes one token if one is available. `wrap(app)` returns a WSGI
  application that passes a request on while tokens last. When they run
  out, it answers HTTP 200 with the JSON body
  `{"status":110,"info":"rate limit exceeded","data":{}}`.
  `send_json(start_response, result)` writes a `JsonResult` as a WSGI
  response.
- `rpcgate.circuit_breaker.CircuitBreaker` counts totals, successes and
  failures in Redis under `circuit_breaker:<name>:total|success|failure`.
  Each counter expires after `window_size` seconds. The breaker has three
  states, `CircuitBreakerState.CLOSED`, `HALF_OPEN` and `OPEN`:
  - A closed breaker opens on a failure when at least half the counted
    requests failed and the failures have reached `failure_threshold`
    (default 5).
  - An open breaker becomes half-open at the next `allow_request()` once
    `half_open_timeout` seconds have passed (default 30).
  - A half-open breaker closes after `success_threshold` successes
    (default 2).

  Each change of state clears the success and failure counters.
  `execute(fn)` calls `fn`, records the outcome and returns the result. It
  raises `rpcgate.errors.CircuitBreakerOpenError` when the breaker refuses
  the call. Redis errors are logged and do not stop the breaker working.
- `rpcgate.middleware.CircuitBreakerMiddleware(app, breakers)` picks a
  breaker by the first path segment, using `service_name(path)`: for
  example, `/user/info` gives `user_service`. If no breaker has that name,
  it falls back to the `default_service` breaker. If there is no
  `default_service` breaker either, the request passes through unguarded.
  A refused request gets `400 Bad Request` with the text
  `circuit breaker is open`. A reply counts as failed when its HTTP status
  is not 200, or when its JSON body has a `status` field that is not 200.
- `rpcgate.response` builds the `{"status", "info", "data"}` envelope:
  - `success(data)` and `error(code, info)` give a `ResponseBean`.
  - `http_response`, `auth_http_result` and `grant_http_result` give a
    `JsonResult`. On error its HTTP status is 200, 401 or 403
    respectively.
  - `param_error_result(err)` gives the reply for bad parameters, with
    code 100.

  A `JsonResult` has `status_code`, `bean`, `content_type` and
  `body_bytes()`. A `CodeError` keeps its own code. Its message is shown
  only when the code is 17 or more. Other errors become code 110 with a
  generic message.
- `rpcgate.errors` holds `CodeError`, the constructors `new_err_code_info`,
  `new_err_code`, `new_info` and `new_err`, `is_code_error`, and the
  status-code constants (`PARAM_ERR`, `UNKNOWN_ERR`, `STATUS_OK`, …).
- `rpcgate.config.load_config(path)` reads a YAML file into a `Config`.
  Key names are matched without regard to case.
  `create_redis(config.redis)` opens a `redis.Redis` client; its host
  may carry a `:port` suffix.
- `rpcgate.types` holds the request and response dataclasses (`Page`,
  `SEO`, `ModuleConfig`, …). The `from_dict` constructors check the
  fields and apply their defaults.

## Install

```
pip install rpcgate
```

## Usage

```yaml
# etc/client.yaml
Name: gateway
Host: 0.0.0.0
Port: 8888
RateLimit:
  Rate: 10
  Capacity: 100
RedisConfig:
  Host: 127.0.0.1:6379
  Db: 0
```

```python
from rpcgate.circuit_breaker import CircuitBreaker
from rpcgate.config import create_redis, load_config
from rpcgate.middleware import CircuitBreakerMiddleware
from rpcgate.ratelimit import TokenBucket, send_json
from rpcgate.response import http_response


def app(environ, start_response):
    return send_json(start_response, http_response({"ping": "pong"}, None))


config = load_config("etc/client.yaml")
redis_client = create_redis(config.redis)

breakers = {
    "default_service": CircuitBreaker("default_service", redis_client),
    "user_service": CircuitBreaker("user_service", redis_client, failure_threshold=3),
}

limiter = TokenBucket(config.rate_limit.rate, config.rate_limit.capacity, redis_client)
application = limiter.wrap(CircuitBreakerMiddleware(app, breakers))
```

A breaker can also guard a single call:

```python
breaker.execute(lambda: call_remote_service())
```

## What it does not do

The package has no command and no HTTP or RPC server of its own. It does
not ship an RPC client for the user service either. Run `application`
under any WSGI server, and supply your own handlers and service calls.

## Tests

```
pip install rpcgate[test]
pytest
```