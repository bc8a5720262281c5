#geometry
EARTH_RADIUS_KM = 6371.0  #mean earth radius for great-circle distances
DISTANCE_DECIMALS = 5     #pairwise distances are rounded to this many decimals

#feasibility
FEASIBILITY_TOLERANCE = 1e-6       #slack used when checking time in air against the budget
NEIGHBORHOOD_TIME_FRACTION = 0.5   #neighborhood walks only move to targets within this share of max time in air

#artificial bee colony sizing (per target / per base, scaled by caller coefficients)
SCOUT_BEES_PER_TARGET = 1.5
BEST_SCOUT_BEES_PER_TARGET = 0.5
FORAGER_BEES_PER_TARGET = 0.25
ABC_ITERATIONS_PER_BASE = 5
MAX_GENERATION_ATTEMPTS = 1000     #cap on tries to produce a not yet seen scout bee

#tabu search sizing
TABU_ITERATIONS_PER_TARGET_AND_BASE = 10
TABU_LIST_SIZE_DIVISOR = 5

#default coefficients
MAX_ITERATIONS_COEFFICIENT = 1.0
SCOUT_BEES_COEFFICIENT = 1.0
FORAGER_BEES_COEFFICIENT = 1.0
TABU_LIST_SIZE_COEFFICIENT = 1.0

#problem generator
GENERATOR_MAX_WIDTH = 1200.0       #width of the corridor the bases are spread along
GENERATOR_HEIGHT_CENTER = 250.0    #y coordinate of the corridor axis
GENERATOR_TARGETS_PER_LEG = 10     #default number of targets per leg
GENERATOR_EVEN_SHARE = 0.8         #share of targets split evenly between bases
GENERATOR_MAX_TIME_COEFFICIENT = 2.0
GENERATOR_MAX_WEIGHT = 10
GENERATOR_MAX_PLACEMENT_ATTEMPTS = 100000
SPEED_KM_PER_HOUR = 100.0
SERVICE_TIME_HOURS = 5.0 / 60.0    #time spent on a base between legs

#experiments
WEIGHT_TOLERANCE = 1e-6            #totals closer than this count as equal results

#visualization and reports
VISUALIZATION_DPI = 300
VISUALIZATION_SIZE = (16, 8)
EXCEL_REPORT_FILENAME = "path_planning_report.xlsx"
ROUTE_MAP_FILENAME = "route_map.png"
