# omronfins

Client-side FINS commands for Omron PLCs: reading and setting the clock,
cycle times, messages, error and access logs, unit names, access rights,
the PLC file system and transfers between memory areas and files.

## Installing

```
pip install omronfins
```

## How it fits together

Every command takes a *link* as its first argument. A link is any object
that implements the `Transport` interface from `omronfins.core`: its
`exchange(mrc, src, body)` method sends one FINS command (main request code,
sub request code and body bytes) to the PLC and returns the response body.
Supplying the link yourself keeps the commands independent of how the
frames travel, whether over UDP, TCP or a test double.

Commands return Python values and raise exceptions when something goes
wrong. All errors derive from `FinsError`; a response the PLC rejects raises
`ResponseError`, a reply that is shorter than the command requires raises
`BodyTooShortError`, and `access_right_acquire` raises `AccessDeniedError`
carrying the `NodeAddress` of the node that holds the access right.

## Example

```python
from omronfins.status import clock_read, cycle_time_read
from omronfins.messages import message_read, MessageMask
from omronfins.address import decode_address

link = make_my_transport()          # your Transport implementation

now = clock_read(link)              # PlcDateTime
print(now.year, now.month, now.day)

cycle = cycle_time_read(link)       # CycleTime with min, avg and max
print(cycle.avg)

for msg in message_read(link, MessageMask.MSG_0 | MessageMask.MSG_1):
    print(msg.msg, msg.text)

addr = decode_address("H82.1")      # PlcAddress
print(addr.name, addr.main_address, addr.sub_address)
```

## Modules

- `omronfins.core`: the `Transport` interface, `communicate`, exceptions
  and access-right commands.
- `omronfins.status`: `cycle_time_read`, `clock_read`, `clock_write`.
- `omronfins.messages`: `message_read`, `message_clear`,
  `message_fal_fals_read`.
- `omronfins.naming`: `name_set`, `name_read`, `name_delete`.
- `omronfins.address`: `decode_address` for text like `D100` or `W20.3`.
- `omronfins.logs`: error and write-access logs and error clearing.
- `omronfins.directory`: directory listing, formatting, deleting files and
  creating or removing directories.
- `omronfins.fileio`: `file_read`, `file_write`, `file_copy`,
  `file_rename`.
- `omronfins.transfers`: moving parameter areas and the user program to
  and from files, and comparing them.

## Running the tests

```
pip install -e ".[test]"
pytest
```