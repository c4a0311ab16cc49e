# skyrelay

Building blocks for a TCP relay that sits between a phone and a plane: the
128-byte frame format and its validation, a bounded queue of raw buffers, and
the per-device receive loop with the listening sockets devices connect to.

## Frame format

Every frame is exactly 128 bytes (`skyrelay.frame.BUFFER_SIZE`):

| Field        | Size | Notes                                    |
|--------------|------|------------------------------------------|
| preamble     | 2    | always `0x0ABC`, big-endian              |
| from byte    | 1    | `0x6F` from a device, `0xDE` from relay  |
| command id   | 1    | see below                                |
| payload size | 1    | must match the command                   |
| payload      | 121  | zero padded                              |
| postamble    | 2    | always `0x0DEF`, big-endian              |

Commands (`skyrelay.frame.Command`):

| Command     | Id     | Payload size |
|-------------|--------|--------------|
| STOP_SRV    | `0x69` | 4            |
| TELEMETRY   | `0x20` | 16           |
| MOTOR_SPEED | `0x21` | 32           |

## `skyrelay.frame`

```python
from skyrelay.frame import Command, Frame, FrameError, parse_buffer

frame = Frame(command_id=Command.TELEMETRY, payload=bytes(16))
data = frame.to_bytes()          # 128 bytes
parsed = parse_buffer(data)      # raises FrameError on a malformed frame
```

- `Frame.from_bytes(data)` decodes a 128-byte buffer without checking it;
  `Frame.to_bytes()` encodes it back.
- `check_frame(frame)` returns the first `ErrorCode` found (preamble, from
  byte, command id, payload too big, incoherent payload size, postamble, in
  that order) or `None` when the frame is valid.
- `parse_buffer(buffer)` decodes and checks in one step, logging and raising
  `FrameError` (carrying `.code` and `.frame`) on failure.
- `is_command_valid`, `check_param_size`, `code_to_string` and `format_frame`
  are the smaller helpers behind these.

## `skyrelay.events`

`EventQueue(capacity=24)` is a thread-safe FIFO of raw buffers.
`push_back` stores a copy and returns `False` when the queue is full;
`pop_front` and `front` raise `IndexError` when it is empty. `is_empty`,
`is_full`, `len()` and `clear()` do what their names say.

## `skyrelay.relay`

- `create_listener(port, host="")` opens a TCP socket listening on the port
  (address reuse enabled) and raises `OSError` on failure.
- `DeviceLink(name, running)` holds one device's socket, connection state and
  `EventQueue`; `running` is a `threading.Event` that keeps it alive.
  `attach(sock)` hands it an accepted socket, `detach()` closes it.
- `relay_loop(link)` runs until `running` is cleared: it waits for a device to
  be attached, collects full 128-byte buffers, and pushes those marked as
  coming from a device onto `link.events`, sends those marked as coming from
  the relay back to the device, and logs anything else. A disconnect detaches
  the link and it waits for the next `attach`.

## What is not included

The package has no command to run and no ready-made relay server: accepting
the phone and the plane, draining each link's queue, validating frames and
forwarding them to the other device is left to your own code, built from the
pieces above.

## Tests

```
pip install .[test]
pytest
```