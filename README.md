# deribit_fix

Building blocks for talking to the Deribit exchange over FIX 4.4 with
`asyncio`:

- `deribit_fix.config`: `DeribitFixConfig`, loaded from the environment and
  adjusted with `with_*` methods.
- `deribit_fix.builder`: `FixMessage` (a tag-to-value mapping with parsing and
  checksum) and `MessageBuilder`, which fills in BodyLength, SendingTime and
  CheckSum.
- `deribit_fix.admin`: the session-level messages `Heartbeat`, `TestRequest`,
  `ResendRequest` and `Reject`, plus the `SessionRejectReason` codes.
- `deribit_fix.connection`: `Connection`, a TCP or TLS stream that sends
  messages and frames incoming ones.
- `deribit_fix.errors`: the `DeribitFixError` exception hierarchy.

## Installation

```
pip install deribit_fix
```

For running the test suite:

```
pip install "deribit_fix[test]"
```

## Configuration

`DeribitFixConfig.from_env()` loads a `.env` file if one is present and then
reads the process environment. Recognised variables:

| Variable | Default |
| --- | --- |
| `DERIBIT_USERNAME` / `DERIBIT_PASSWORD` | empty |
| `DERIBIT_TEST_MODE` | `true` |
| `DERIBIT_USE_SSL` | `false` |
| `DERIBIT_HOST` | `test.deribit.com` (test) or `www.deribit.com` (production) |
| `DERIBIT_PORT` | `9881` test, `9880` production, `9883` with SSL |
| `DERIBIT_HEARTBEAT_INTERVAL` | `30` |
| `DERIBIT_CONNECTION_TIMEOUT` | `10` seconds |
| `DERIBIT_RECONNECT_ATTEMPTS` | `3` |
| `DERIBIT_RECONNECT_DELAY` | `5` seconds |
| `DERIBIT_ENABLE_LOGGING` | `true` |
| `DERIBIT_LOG_LEVEL` | `info` |
| `DERIBIT_SENDER_COMP_ID` | `CLIENT` |
| `DERIBIT_TARGET_COMP_ID` | `DERIBITSERVER` |
| `DERIBIT_CANCEL_ON_DISCONNECT` | `false` |
| `DERIBIT_APP_ID` / `DERIBIT_APP_SECRET` | unset |

Booleans are `true` or `false`; numbers are unsigned integers. A value that
fails to parse is logged and the default is used instead. The `with_*`
methods return a new, adjusted configuration, and `validate()` raises
`ConfigError` when something required is missing or empty, the port or
heartbeat interval is 0, or only one of the application ID and secret is set:

```python
from deribit_fix.config import DeribitFixConfig
from deribit_fix.errors import ConfigError

password = "password"
config = (
    DeribitFixConfig.from_env()
    .with_credentials("user", password)
    .with_heartbeat_interval(30)
    .with_cancel_on_disconnect(True)
)

try:
    config.validate()
except ConfigError as exc:
    print(exc)

print(config.connection_url())  # e.g. test.deribit.com:9881
```

`DeribitFixConfig.production()`, `production_with_credentials()`,
`production_ssl()` and `test_ssl()` start from the environment and switch to
the matching host and port.

## Building and parsing messages

```python
from deribit_fix.builder import FixMessage, MessageBuilder

message = (
    MessageBuilder()
    .msg_type("0")
    .sender_comp_id("CLIENT")
    .target_comp_id("DERIBITSERVER")
    .msg_seq_num(1)
    .build()
)
print(str(message))  # 8=FIX.4.4|9=...|34=1|35=0|49=...|52=...|56=...|10=...| with SOH separators

parsed = FixMessage.parse(str(message))
print(parsed.get_field(35))  # "0"
```

`build()` raises `MessageConstructionError` if MsgType, SenderCompID,
TargetCompID or MsgSeqNum is missing, and adds the current UTC time as
SendingTime when none was set. `FixMessage.parse()` raises
`MessageParsingError` on a field without `=`, a non-numeric tag or an empty
message.

## Administrative messages

```python
from deribit_fix.admin import Heartbeat, Reject, ResendRequest, TestRequest

request = TestRequest.with_timestamp()
message = request.to_fix_message("CLIENT", "DERIBITSERVER", 2)
print(message.get_field(35))   # "1"
print(message.get_field(112))  # "TESTREQ_<milliseconds>"

reply = Heartbeat.response(request.test_req_id)
assert reply.is_test_response()

gap = ResendRequest(53, 54)
print(gap.message_count())                                   # 2
print(ResendRequest.from_sequence(201).is_infinite_range())  # True

reject = Reject.missing_tag(789, 35, "D")
print(reject.to_fix_message("CLIENT", "DERIBITSERVER", 3).get_field(373))  # "1"
```

`str()` of any of these messages gives its fields as JSON.

## Connection

```python
import asyncio

from deribit_fix.admin import Heartbeat
from deribit_fix.config import DeribitFixConfig
from deribit_fix.connection import Connection


async def run() -> None:
    config = DeribitFixConfig.from_env()
    async with await Connection.open(config) as connection:
        heartbeat = Heartbeat().to_fix_message(
            config.sender_comp_id, config.target_comp_id, 1
        )
        await connection.send_message(heartbeat)
        incoming = await connection.receive_message()  # None when nothing arrived
        if incoming is not None:
            print(incoming.get_field(35))


asyncio.run(run())
```

`Connection.open()` connects over TLS when `use_ssl` is set and raises
`FixTimeoutError` if `connection_timeout` passes first. `receive_message()`
waits up to one second for data and returns `None` when no complete message
is buffered yet or the server closed the socket (after which
`is_connected()` is `False`). `close()` and `reconnect()` end and re-open the
stream. Failures are raised as subclasses of `DeribitFixError`:
`FixConnectionError`, `FixTimeoutError`, `FixIOError`, `MessageParsingError`
and so on.

## What this package does not do

There is no session layer on top of `Connection`: no logon or
authentication, no sequence-number tracking, no automatic heartbeats or
replies to Test Requests, and no order entry, market data or position
requests. Messages for those have to be built with `MessageBuilder` and sent
by the caller. There is no command-line program.