# flowline

Building blocks for moving data items through thread-based pipelines, together
with dividers that share a number of handlers among priorities and checks for
such dividers.

## Channels

`flowline.channel.Channel(capacity=0)` is a thread-safe FIFO channel.

- With capacity `0`, `send()` waits until a receiver has taken the item. With a
  positive capacity, `send()` waits only while the buffer is full.
- `receive(timeout=None)` returns the next item. It raises `TimeoutError` if no
  item arrives within `timeout` seconds. It raises `ChannelClosed` once the
  channel is closed and empty.
- `close()` closes the channel, and receivers can still drain the items left in
  it. Sending on a closed channel raises `ChannelClosed`, and so does closing it
  a second time.
- Iterating over a channel yields items until it is closed and empty.
- The `capacity` property gives the buffer size.

## Disciplines

Each discipline reads from a source and writes to its own output `Channel`,
which it closes when the source is exhausted. The source can be a `Channel`,
which is exhausted when it is closed, or any iterable. The work runs in a
background thread that starts when the discipline is created.

- `flowline.join.Joiner(source, join_size, no_copy=False, timeout=0.0)`
  collects single items into lists of at most `join_size` items. A list is
  written when it is full, when `timeout` seconds have passed since the last
  output, or when the source ends. A zero or negative timeout means the joiner
  waits for the list to fill or for the source to end.
- `flowline.unite.Uniter(source, join_size, no_copy=False, timeout=0.0)`
  works the same way but takes sequences and puts their items together into one
  list. An input sequence is never split between output lists. A sequence at
  least `join_size` long is passed on by itself.
- `flowline.limit.Limiter(source, limit)` passes items to its output at no more
  than `limit.quantity` items per `limit.interval` seconds. `limit` is a
  `flowline.limit.Rate`. When the number of items is a multiple of the quantity,
  the limiter still waits one more interval after the last item before it
  closes its output.

With `no_copy=True`, the joiner and uniter write their accumulated list
directly instead of a copy. Call `release()` once you have finished with each
output list. Without `no_copy`, `release()` does nothing.

Invalid options raise exceptions derived from `ValueError`:

- `flowline.join`: `InputEmptyError` and `JoinSizeZeroError`, both subclasses of
  `JoinError`.
- `flowline.unite`: the same names, subclasses of `UniteError`.
- `flowline.limit`: `InputEmptyError`, `IntervalNegativeError`,
  `IntervalZeroError` and `QuantityZeroError`, subclasses of `LimitError`. These
  are raised by the `Limiter` constructor and by `Rate.validate()`.

```python
import threading

from flowline.channel import Channel
from flowline.join import Joiner

source = Channel(10)
joiner = Joiner(source, join_size=10, timeout=1.0)

def produce():
    for item in range(1, 28):
        source.send(item)
    source.close()

threading.Thread(target=produce).start()

for batch in joiner.output():
    print(batch)       # [1..10], [11..20], [21..27]
    joiner.release()
```

## Priority distribution

`flowline.divider` has two dividers. Each one adds to the `distribution` dict
how many of `quantity` handlers go to each priority, and returns that dict.

- `fair` splits the quantity evenly among the priorities.
- `rate` splits it in proportion to the priority values. It raises
  `OverflowError` if the priorities sum to more than an unsigned 64-bit value.

```python
from flowline.divider import fair, rate

fair(10, [7, 2, 1], {})   # {7: 4, 2: 3, 1: 3}
rate(6, [3, 2, 1], {})    # {3: 3, 2: 2, 1: 1}
```

`flowline.priority` provides:

- `compare(first, second)`, which orders priorities from highest to lowest when
  used with `functools.cmp_to_key`.
- `divide(divider, quantity, priorities, distribution)`, which runs a divider
  and raises `DividerBadError` if the result does not add up to `quantity`.
- The error classes for a priority discipline, all derived from
  `PriorityError`.

`flowline.inspection` checks a divider against the requirements for dividers.
Each check returns a `Result`. `Result.ok` is true when the check passes.
Otherwise the result holds the `conclusion` (an `InspectionError`), any `err`
raised by the divider, and the `quantity` and `priorities` that failed.

- `is_quantity_preserved(divider, opts_set)`: the distribution adds up to the
  quantity passed in, for every non-empty combination of priorities.
- `is_monotonic(divider, opts_set)`: no priority's share goes down when the
  quantity goes up.
- `is_non_fatal_quantity(divider, opts)` and
  `find_min_non_fatal_quantity(divider, opts)`: no priority gets zero handlers.
- `is_suitable_quantity(divider, opts, suitable_diff)` and
  `find_min_suitable_quantity(divider, opts, suitable_diff)`: every share is
  within `suitable_diff` percent of its ideal value.

`default_set()` returns the standard options: a quantity of 1000 and the
priorities 10 down to 1.

## Timing research

`flowline.research` works with times given in integer nanoseconds:

- `quantity_per_interval` counts times per span and returns `QoT` records.
- `deviations` builds a histogram of interval deviations, in percent, clamped
  to the range -100 to 100.
- `qot_to_bar_chart` and `deviations_to_bar_chart` turn these into `BarData`
  rows.
- `total_duration` returns the largest duration.
- `format_duration` formats nanoseconds as text such as `10ms` or `8.500001ms`.

## What this package does not do

- It has no priority discipline that reads from several prioritised inputs and
  hands items to handlers. It provides the dividers, `divide`, `compare` and the
  related error classes, but not the dispatcher.
- It does not draw charts. The research helpers produce plain `BarData` rows,
  and rendering them is up to you.