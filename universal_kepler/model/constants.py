class CONVERTER:
  # Angle Conversions
  RAD_PER_DEG = 3.141592653589793 / 180.0  # [radian] per [degree]
  DEG_PER_RAD = 180.0 / 3.141592653589793  # [degree] per [radian]

  # Time Conversions
  SEC_PER_DAY = 86400.0                    # [seconds] per [day]
  SEC_PER_SEC = 1.0                        # [seconds] per [second]

  # Distance Conversions
  KM_PER_M = 1.0 / 1000.0                  # [kilometers] per [meter]

  # Gravitational parameter conversions
  KM3_PER_M3 = KM_PER_M**3                 # [km³] per [m³]

  # Accepted time units mapped to [seconds] per [unit]
  SEC_PER_TIME_UNIT = {
    'seconds' : SEC_PER_SEC,
    'days'    : SEC_PER_DAY,
  }

  # Accepted distance units mapped to [km³/s²] per [m³/s²] scaling of a gravitational parameter
  GP_SCALE_PER_DISTANCE_UNIT = {
    'm'  : 1.0,
    'km' : KM3_PER_M3,
  }


class KEPLERSTM:
  """
  Iteration controls of the universal-variable Kepler state transition.

  Notes:
  ------
    TIME_TOL is an absolute residual in seconds, independent of the time unit
    the caller used for the requested time steps.
  """
  TIME_TOL       = 1.0    # Kepler-loop time residual tolerance [s]
  MAX_ITERATIONS = 25     # Kepler-loop iterations before falling back to element propagation
  CONT_FRAC_TOL  = 1e-14  # Continued fraction partial-sum tolerance [-]


class SOLARSYSTEMCONSTANTS:
  """
  Gravitational parameters of the major bodies [m³/s²].
  """

  class SUN:
    GP = 1.32712440018e20                   # Sun's gravitational parameter [m³/s²]

  class MERCURY:
    GP = 2.2032e13                          # Mercury's gravitational parameter [m³/s²]

  class VENUS:
    GP = 3.2485859e14                       # Venus's gravitational parameter [m³/s²]

  class EARTH:
    GP = 3.986004418e14                     # Earth's gravitational parameter [m³/s²]

  class MOON:
    GP = 4.9048695e12                       # Moon's gravitational parameter [m³/s²]

  class MARS:
    GP = 4.28283e13                         # Mars's gravitational parameter [m³/s²]

  class JUPITER:
    GP = 1.2671277e17                       # Jupiter's gravitational parameter [m³/s²]

  class SATURN:
    GP = 3.79406e16                         # Saturn's gravitational parameter [m³/s²]

  class URANUS:
    GP = 5.79455e15                         # Uranus's gravitational parameter [m³/s²]

  class NEPTUNE:
    GP = 6.83653e15                         # Neptune's gravitational parameter [m³/s²]

  class PLUTO:
    GP = 9.830e11                           # Pluto's gravitational parameter [m³/s²]

  # Mapping from body name to gravitational parameter [m³/s²]
  NAME_TO_GP = {
    'SUN'     : SUN.GP,
    'MERCURY' : MERCURY.GP,
    'VENUS'   : VENUS.GP,
    'EARTH'   : EARTH.GP,
    'MOON'    : MOON.GP,
    'MARS'    : MARS.GP,
    'JUPITER' : JUPITER.GP,
    'SATURN'  : SATURN.GP,
    'URANUS'  : URANUS.GP,
    'NEPTUNE' : NEPTUNE.GP,
    'PLUTO'   : PLUTO.GP,
  }
