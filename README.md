# ultralog

ultralog records messages together with a priority. Each message goes either to a log file or to a TCP client that is connected to the logger. A second command, `ultralog-monitor`, connects to the logger as that client. It shows each entry as it arrives and keeps running statistics on the entries.

## Installation

```
pip install .
```

The package uses only the Python standard library.

## The logger

```
ultralog LOG_FILE -PRIORITY [IP:PORT]
```

- `LOG_FILE` is the file that entries are written to. It is created, or emptied if it already exists, when the logger starts.
- `-PRIORITY` is the default priority. Use `-r` for regular, `-i` for important or `-c` for critical. Letters are not case-sensitive.
- `IP:PORT` is the address to listen on for a monitor. It is optional and defaults to `127.0.0.1:60420`. Each part of the address must be in the range 0–255, and the port must be in the range 0–65535.

If the arguments are wrong, the logger prints what is wrong and how to use it. It then waits for Enter and exits with status 1.

Example:

```
ultralog log.txt -r 127.0.0.1:60420
```

Each line you type is logged. To give a line its own priority, end it with a space, a dash and one letter:

```
a bright red fox jumps over a high fence -c
```

How a line is handled:

- A line with no flag is logged at the default priority.
- A line whose flag is a priority at or above the default is logged at that priority.
- A line whose flag is below the default priority is discarded.
- A line whose flag is not a priority letter is also discarded.

ANSI escape sequences, such as those that arrow keys produce, are removed from the input. Entries are written by a pool of worker threads. On exit, the logger waits until every queued entry has been written.

Special input:

- `-p` asks for a new default priority (`r`, `i` or `c`). Any other answer leaves the default unchanged.
- `-t` switches the destination between the file and the socket. Entries sent to the socket while no client is connected are lost.
- `exit` quits. End of input also quits.

Each entry has this form:

```
message: <text> (priority: <regular|important|critical>) [H:M:S D/M/YYYY]
```

The time is local time, without zero padding.

The logger accepts one client at a time. On the socket, every entry is sent as a fixed 512-byte frame padded with NUL bytes, so an entry longer than 511 bytes is cut short. While a client is connected, the logger sends it `PING` every ten seconds. If the client does not answer `PONG` within three seconds, the logger drops it.

## The monitor

```
ultralog-monitor IP:PORT MESSAGES TIMEOUT
```

- `IP:PORT` is the address of the logger.
- `MESSAGES` is the number of received messages after which the statistics are published.
- `TIMEOUT` is the number of seconds after which the statistics are published.

`MESSAGES` and `TIMEOUT` must be made of digits only.

Example:

```
ultralog-monitor 127.0.0.1:60420 3 5
```

The screen refreshes every tenth of a second and shows:

- the connection parameters, and how many messages and seconds remain until the next update;
- the last entry received;
- the connection state;
- the total number of messages, and the number for each priority;
- the number of messages received in the last hour;
- the maximum, minimum and average length of a message body. Until a message has been published, these show `[no messages yet]`.

If the connection fails or closes, the monitor tries again every second. It answers the logger's pings by itself. Press Ctrl+C to quit.

## Using it as a library

```python
from ultralog.common import CoreConfig, Priority
from ultralog.core import Core

with Core(CoreConfig("log.txt", Priority.IMPORTANT), "127.0.0.1", 60420) as core:
    core.log("disk almost full -c")    # True: critical is at or above important
    core.log("routine heartbeat -r")   # False: regular is below important
```

Modules:

- `ultralog.common` holds `Priority`, `CoreConfig`, the result enums, and helpers such as `format_entry`, `validate_priority` and `strip_escape_codes`.
- `ultralog.file_logger.FileLogger` writes entries to a file. It is thread-safe.
- `ultralog.socket_logger.SocketLogger` listens for one client without blocking. Its methods are `wait_for_client`, `ping_client`, `write` and `close`.
- `ultralog.core.Core` sends input to the file or the socket and filters it by priority. `handle_input` splits a line into its message and its priority letter.
- `ultralog.pool.Pool` is a fixed-size pool of worker threads. Its methods are `submit`, `is_working` and `stop`, and it works as a context manager.
- `ultralog.monitor.statistician.Statistician` keeps the monitor's statistics. The clock can be replaced for testing.
- `ultralog.monitor.socket_manager.SocketManager` is the client side of the connection.

## Running the tests

```
pip install .[test]
pytest
```