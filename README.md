# swarmbot

Pieces for running a swarm of Minecraft bots from Python:

- `swarmbot.codec`: the protocol's byte format, with `ByteReader` and `ByteWriter` for
  big-endian integers, floats, VarInts, length-prefixed strings and UUIDs.
- `swarmbot.geometry`: `Location`, `Displacement`, `Direction`, `BlockLocation`,
  `BlockLocation2D`, `ChunkLocation` and `Selection2D`, plus packed block positions
  (`encode_position` / `decode_position`).
- `swarmbot.blocks`: block states and kinds, their simple movement types, and block data
  loaded from JSON tables.
- `swarmbot.chat`: chat components, ANSI colouring, and spotting whispers, player messages
  and `#commands`.
- `swarmbot.messages`: JSON commands (`Mine`, `GoTo`, `Attack`, `Cancelled`, `Finished`)
  and websocket channels for exchanging them (`Comm`, `CommandReceiver`).
- `swarmbot.bootstrap`: user and proxy lists in colon-separated files, and server address
  lookup through the `_minecraft._tcp` SRV record.
- `swarmbot.options`: command-line options for a swarm.
- `swarmbot.search`, `swarmbot.nodes`, `swarmbot.moves`, `swarmbot.travel`: an
  incremental, time-boxed A* search and the walking, falling, swimming and parkour moves
  a player can make through a block world.

## Reading and writing the wire format

```python
from swarmbot.codec import ByteReader, ByteWriter

writer = ByteWriter()
writer.write_varint(300)
writer.write_string("hello")
data = writer.freeze()

reader = ByteReader(data)
assert reader.read_varint() == 300
assert reader.read_string() == "hello"
assert reader.empty()
```

## Working with positions

```python
from swarmbot.geometry import BlockLocation, decode_position, encode_position

spot = BlockLocation(10, 64, -3)
print(spot.below())            # [10, 63, -3]
print(spot.center_bottom())    # [10.50 64.00 -2.50]
assert decode_position(encode_position(spot)) == spot
```

## Chat commands

```python
from swarmbot.chat import Chat

chat = Chat.from_json('{"extra": [{"text": "Steve whispers: #goto 1 2 3"}]}')
command = chat.player_dm().into_cmd()
print(command.command, command.args)   # goto ['1', '2', '3']
```

## Path finding

`swarmbot.travel` sets up searches towards a block, near a block, into a chunk or to the
centre of a chunk. A search runs in slices: each call to `iterate_until` works until its
deadline and either reports that it is still in progress or returns a `PathResult` whose
`complete` flag says whether the goal was reached. When a search has used up its time
budget (five seconds unless changed with `set_max_millis`), the most promising partial
path is returned instead.

```python
from swarmbot.geometry import BlockLocation
from swarmbot.travel import navigate_block

problem = navigate_block(BlockLocation(0, 1, 0), BlockLocation(20, 1, 20))
```

The world handed to the search only needs a `get_block_simple(location)` method that
returns the `SimpleType` at a block, or `None` where the world is not loaded.

## Running the tests

Install the `test` extra and run pytest from the project directory.