# carwash

`carwash` is a Telegram bot for booking car wash slots. The bot talks to users in Russian.

A user picks a day from today and the next six days. They then pick a free hourly slot and type the car's make and plate number, separated by a space. Users can also see the full schedule and cancel their own bookings. Bookings are stored in a SQLite database. The default file is `bookings.db` in the working directory.

If a channel is configured, the bot posts every new booking there. Each post carries a cancel button, and only administrators can use it.

## Installation

```
pip install .
```

## Configuration

Settings come from environment variables. When you run the `carwash` command, it also loads a `.env` file from the working directory if one exists.

| Variable             | Meaning                                              | Default   |
|----------------------|------------------------------------------------------|-----------|
| `TELEGRAM_BOT_TOKEN` | Bot token (required)                                 | empty     |
| `ADMIN_CHAT_ID`      | Chat that receives new-booking and cancellation notes | `0`       |
| `ADMIN_IDS`          | Comma-separated user ids allowed to cancel from the channel | empty |
| `START_TIME`         | First bookable hour of the day                        | `8`       |
| `END_TIME`           | Last bookable hour of the day (inclusive)             | `20`      |
| `CHANNEL_ID`         | Channel that receives new-booking posts               | `0` (off) |

The user in `ADMIN_CHAT_ID` may also cancel from the channel. Integer values that cannot be parsed fall back to their defaults. Entries in `ADMIN_IDS` that are not numbers are ignored.

Example `.env`:

```
TELEGRAM_BOT_TOKEN=token
ADMIN_IDS=1001,1002
START_TIME=9
END_TIME=18
```

## Running

```
carwash
carwash --db-path /path/to/bookings.db
```

If no token is set, the command exits with status 1. It also exits with status 1 if the token is rejected or the database cannot be opened. Otherwise it long-polls Telegram for updates until you interrupt it with Ctrl+C.

## Bot commands

- `/start`, `/menu`, "🏠 Главное меню": main menu
- `/book`, "📝 Записаться": choose a day, then a time
- `/schedule`, "🕒 Расписание": all bookings, grouped by day and sorted by time
- `/mybookings`, "❌ Мои записи": your bookings
- `/cancel`, "❌ Отменить запись": pick one of your bookings to cancel

On today's date, hours that have already begun are shown as unavailable. A slot that starts less than an hour from now cannot be booked. After the last bookable hour, today cannot be chosen at all.

## Using it from Python

```python
from carwash.config import load
from carwash.bot import create_bot

bot = create_bot(load(), "bookings.db")
bot.run()
```

`create_bot` makes a Bot API call to check the token before it opens the database. `carwash.config.load()` reads `os.environ` and accepts an optional mapping instead. It does not read `.env` by itself.

The pieces can also be used on their own:

- `carwash.storage.SQLiteStorage` is the booking store. It also works as a context manager.
- `carwash.schedule.ScheduleService` is an in-memory schedule with the same slot rules.
- `carwash.views` builds every message text and keyboard without any network access.
- `carwash.api.TelegramAPI` is a minimal Bot API client. It raises `TelegramError` on failure.

```python
from carwash.storage import SQLiteStorage

with SQLiteStorage("bookings.db", 8, 20) as storage:
    for booking in storage.get_bookings_by_date("01.06.2025"):
        print(booking.time, booking.car_model, booking.car_number)
```

## Limitations

- Updates arrive only by long polling. There is no webhook server.
- The "ℹ️ Помощь" button in the main menu has no handler. Pressing it gets the "unknown command" reply.
- The cancel buttons in the `/mybookings` list do not match stored booking ids, so they answer that the booking was not found. To cancel, use `/cancel`.
- Bookings are never removed automatically once their date has passed.

## Tests

```
pip install .[test]
pytest
```