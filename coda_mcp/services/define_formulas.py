"""Define Formulas — declarations of the bundled formulas.

Invariants:
    - Names are unique across FORMULAS_BUILTIN + FORMULAS_EXAMPLES
    - Parameter specs are declarative only — handlers read args positionally

Design Decisions:
    - Declarations in dedicated files, bodies in handle_formulas.py: explicit,
      no auto-discovery
    - Builtins always load; examples are opt-out via LOAD_EXAMPLE_PACKS
"""

from coda_mcp.core.catalog import Formula, ParameterSpec
from coda_mcp.core.domain_types import ParameterType
from coda_mcp.services import handle_formulas

HELLO = Formula(
    name="Hello",
    description="Returns a greeting message.",
    parameters=(
        ParameterSpec(
            name="name",
            type=ParameterType.STRING,
            description="The name to greet.",
            required=True,
        ),
    ),
    execute=handle_formulas.hello,
)

CURRENT_TIME = Formula(
    name="CurrentTime",
    description="Returns the current time.",
    parameters=(
        ParameterSpec(
            name="timezone",
            type=ParameterType.STRING,
            description="The timezone to use (e.g., 'UTC', 'America/New_York').",
            required=False,
        ),
    ),
    execute=handle_formulas.current_time,
)

GET_WEATHER = Formula(
    name="GetWeather",
    description="Gets the current weather for a location",
    parameters=(
        ParameterSpec(
            name="location",
            type=ParameterType.STRING,
            description="The location to get weather for (e.g., 'New York', 'London')",
            required=True,
        ),
        ParameterSpec(
            name="units",
            type=ParameterType.STRING,
            description="The units to use (metric or imperial)",
            required=False,
        ),
    ),
    execute=handle_formulas.get_weather,
)

FORMAT_CURRENCY = Formula(
    name="FormatCurrency",
    description="Formats a number as currency",
    parameters=(
        ParameterSpec(
            name="amount",
            type=ParameterType.NUMBER,
            description="The amount to format",
            required=True,
        ),
        ParameterSpec(
            name="currencyCode",
            type=ParameterType.STRING,
            description="The ISO currency code (e.g., 'USD', 'EUR')",
            required=False,
        ),
        ParameterSpec(
            name="locale",
            type=ParameterType.STRING,
            description="The locale to use for formatting (e.g., 'en-US', 'fr-FR')",
            required=False,
        ),
    ),
    execute=handle_formulas.format_currency,
)

FORMULAS_BUILTIN = [HELLO, CURRENT_TIME]

FORMULAS_EXAMPLES = [GET_WEATHER, FORMAT_CURRENCY]
