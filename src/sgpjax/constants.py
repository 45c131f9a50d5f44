"""
The `constants` module defines the mathematical, time and policy constants used by the propagators.

Policy constants are taken verbatim from Spacetrack Report No. 3. They are
not tolerances to be tuned: changing any of them changes the trajectories
produced by the models.
"""

from math import pi as PI

# Mathematical Constants
"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)

"""
Full circle. Units: *rad*
"""
TWOPI = 2.0 * PI

"""
Two thirds, the exponent relating mean motion and semi-major axis. Units: *dimensionless*
"""
TOTHRD = 2.0 / 3.0

# Time Constants

"""
Minutes in one day. Units: *min/day*
"""
MINUTES_PER_DAY = 1440.0

"""
Julian Date of 1950 January 0.0 UT, the origin of the deep-space day count. Units: *days*
"""
JD_1950_JAN_0 = 2433281.5

"""
Conversion from revolutions per day to radians per minute. Units: *(rad/min)/(rev/day)*
"""
REVDAY2RADMIN = TWOPI / MINUTES_PER_DAY

# Model Selection

"""
Orbital period separating the near-Earth and deep-space model families. Periods
strictly below this value use SGP4/SGP8, all others SDP4/SDP8. Units: *min*
"""
DEEP_SPACE_PERIOD = 225.0

"""
Orbits with a period at or above this value are flagged as 24-hour (synchronous)
resonant. Units: *min*
"""
SYNCHRONOUS_PERIOD = 1200.0

"""
Inclusive period range flagged as 12-hour resonant. Units: *min*
"""
HALF_DAY_PERIOD_RANGE = (600.0, 800.0)

# Decay and Geometry Policy

"""
Lower bound applied to the propagated eccentricity before Kepler's equation
is solved. Units: *dimensionless*
"""
ECCENTRICITY_FLOOR = 1.0e-6

"""
Mean eccentricities below this value are treated as a decayed orbit. Units: *dimensionless*
"""
MIN_ECCENTRICITY = -0.001

"""
Semi-major axes below this value are treated as a decayed orbit. Units: *Earth radii*
"""
MIN_SEMIMAJOR_AXIS = 0.95

# Kepler Solver

"""
Hard cap on Newton iterations in the Kepler solver.
"""
KEPLER_MAX_ITERATIONS = 10

"""
Convergence threshold on the Newton step. Units: *rad*
"""
KEPLER_TOLERANCE = 1.0e-12

"""
Largest Newton step the Kepler solver may take. Units: *rad*
"""
KEPLER_MAX_STEP = 0.95

# Atmospheric Drag

"""
Perigee height below which SGP4 drops the higher-order drag terms. Units: *km*
"""
SIMPLIFIED_PERIGEE = 220.0

"""
Perigee height below which the density function parameter s is lowered. Units: *km*
"""
LOW_PERIGEE = 156.0

"""
Perigee height below which s is fixed at 20 km above the surface. Units: *km*
"""
VERY_LOW_PERIGEE = 98.0

"""
SGP8 drag rate (fraction of mean motion per day) below which the drag
equations are truncated to their linear form. Units: *dimensionless*
"""
SGP8_SIMPLIFIED_DRAG = 2.16e-3
