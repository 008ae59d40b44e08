# Ability ids are opaque to the link engine, they only need to match the log.
RIPTIDE = 61295
PRIMORDIAL_WAVE = 428332
PRIMORDIAL_WAVE_BUFF = 375986
PRIMAL_TIDE_CORE_TALENT = 382045
HEALING_WAVE = 77472
HEALING_RAIN = 73920
HEALING_RAIN_HEAL = 73921
OVERFLOWING_SHORES_TALENT = 383222
OVERFLOWING_SHORES_HEAL = 383223
CHAIN_HEAL = 1064
FLOW_OF_THE_TIDES_TALENT = 382039
DOWNPOUR = 207778

# relation names
HARDCAST = "hardcast"
APPLIED_HEAL = "applied_heal"
RIPTIDE_PWAVE = "riptide_primordial_wave"
HEALING_WAVE_PWAVE = "healing_wave_primordial_wave"
PWAVE_REMOVAL = "primordial_wave_removal"
PRIMAL_TIDE_CORE = "primal_tide_core"
HEALING_RAIN_LINK = "healing_rain"
HEALING_RAIN_GROUPING = "healing_rain_grouping"
OVERFLOWING_SHORES_LINK = "overflowing_shores"
CHAIN_HEAL_LINK = "chain_heal"
CHAIN_HEAL_GROUPING = "chain_heal_grouping"
FLOW_OF_THE_TIDES = "flow_of_the_tides"
DOWNPOUR_LINK = "downpour"

CAST_BUFFER_MS = 100
PWAVE_TRAVEL_MS = 1000
HEALING_RAIN_DURATION_MS = 10000
