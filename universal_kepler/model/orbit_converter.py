import warnings
import numpy as np


class TwoBodyRootSolvers:
  """
  Root solvers for the conic forms of Kepler's equation.
  """

  @staticmethod
  def kepler_elliptic(
    ma       : float,
    ecc      : float,
    tol      : float = 1e-13,
    max_iter : int   = 200,
  ) -> float:
    """
    Solve Kepler's equation ma = ea - ecc*sin(ea) for eccentric anomaly ea.

    Input:
    ------
      ma : float
        Mean anomaly [rad]
      ecc : float
        Eccentricity (0 <= ecc < 1)
      tol : float
        Convergence tolerance
      max_iter : int
        Maximum iterations

    Output:
    -------
      ea : float
        Eccentric anomaly [rad], in the same revolution as ma
    """
    # Work on the principal revolution, restore it at the end
    revolutions = np.floor((ma + np.pi) / (2 * np.pi))
    ma_wrapped  = ma - 2 * np.pi * revolutions

    # Initial guess
    if ecc < 0.8:
      ea = ma_wrapped
    else:
      ea = np.pi if ma_wrapped >= 0 else -np.pi

    # Newton-Raphson iteration
    for i in range(max_iter+1):
      delta_ea = -(ea - ecc * np.sin(ea) - ma_wrapped) / (1 - ecc * np.cos(ea))
      ea       = ea + delta_ea
      if abs(delta_ea) < tol:
        break
      if i == max_iter:
        warnings.warn(f"kepler_elliptic iteration did not converge for ma={ma}, ecc={ecc}")

    return ea + 2 * np.pi * revolutions

  @staticmethod
  def kepler_hyperbolic(
    mha      : float,
    ecc      : float,
    tol      : float = 1e-13,
    max_iter : int   = 200,
  ) -> float:
    """
    Solve the hyperbolic Kepler equation mha = ecc*sinh(ha) - ha for ha.

    Input:
    ------
      mha : float
        Mean hyperbolic anomaly [rad]
      ecc : float
        Eccentricity (ecc > 1)
      tol : float
        Convergence tolerance
      max_iter : int
        Maximum iterations

    Output:
    -------
      ha : float
        Hyperbolic anomaly [rad]
    """
    ha = np.arcsinh(mha / ecc)

    for i in range(max_iter+1):
      delta_ha = -(ecc * np.sinh(ha) - ha - mha) / (ecc * np.cosh(ha) - 1)
      ha       = ha + delta_ha
      if abs(delta_ha) < tol:
        break
      if i == max_iter:
        warnings.warn(f"kepler_hyperbolic iteration did not converge for mha={mha}, ecc={ecc}")

    return ha

  @staticmethod
  def barker(
    mpa : float,
  ) -> float:
    """
    Solve Barker's equation mpa = pa + pa³/3 for the parabolic anomaly pa = tan(ta/2).

    Input:
    ------
      mpa : float
        Mean parabolic anomaly [-]

    Output:
    -------
      pa : float
        Parabolic anomaly [-]

    Notes:
    ------
      Closed-form Cardano root, written as w - 1/w with w the real cube root of
      3|mpa|/2 + sqrt(9 mpa²/4 + 1) to avoid cancellation for large |mpa|.
    """
    half_three_mpa = 1.5 * abs(mpa)
    w              = np.cbrt(half_three_mpa + np.sqrt(half_three_mpa**2 + 1))
    return float(np.sign(mpa) * (w - 1 / w))


class OrbitConverter:
  """
  Conversion between Cartesian states and classical orbital elements.

  Used as the robust fallback of the universal-variable propagator: a state is
  converted to elements, its mean anomaly advanced, and converted back. Covers
  circular, elliptic, parabolic and hyperbolic orbits. Rectilinear (zero
  angular momentum) states have no orbit plane and are rejected.
  """

  # Small number for numerical comparisons
  EPS = 1e-12

  # Anomaly selector to coe dictionary key
  ANOMALY_KEYS = {
    'mean' : 'ma',
    'true' : 'ta',
  }

  @staticmethod
  def pv_to_coe(
    pos_vec : np.ndarray,
    vel_vec : np.ndarray,
    gp      : float,
  ) -> dict:
    """
    Convert Cartesian position and velocity vectors to classical orbital elements.

    Input:
    ------
      pos_vec : np.ndarray
        Position vector.
      vel_vec : np.ndarray
        Velocity vector.
      gp : float
        Gravitational parameter, in units consistent with pos_vec and vel_vec.

    Output:
    -------
      coe : dict
        Dictionary containing orbital elements:
        - sma  : semi-major axis (np.inf for parabolic orbits)
        - ecc  : eccentricity [-]
        - inc  : inclination [rad]
        - raan : right ascension of the ascending node [rad]
        - aop  : argument of periapsis [rad]
        - slr  : semi-latus rectum
        - ta   : true anomaly [rad]
        - ma   : mean anomaly [rad] (mean hyperbolic or mean parabolic
                 anomaly for unbound orbits)
        - ea   : eccentric anomaly [rad] (None unless elliptic)
        - ha   : hyperbolic anomaly [rad] (None unless hyperbolic)
        - pa   : parabolic anomaly [-] (None unless parabolic)

    Notes:
    ------
      - For equatorial orbits the ascending node is undefined; raan is set to
        zero and aop is measured from the inertial x-axis.
      - For circular orbits the periapsis is undefined; the eccentricity
        direction is taken along the position vector, so ta = 0.

    Source:
    -------
      Modified from
      Analytical Mechanics of Space Systems, Fourth Edition
      Hanspeter Schaub and John L. Junkins
      DOI: https://doi.org/10.2514/4.105210
    """
    eps = OrbitConverter.EPS

    pos_vec = np.asarray(pos_vec, dtype=float).flatten()
    vel_vec = np.asarray(vel_vec, dtype=float).flatten()

    pos_mag = np.linalg.norm(pos_vec)
    pos_dir = pos_vec / pos_mag

    # Angular momentum
    ang_mom_vec = np.cross(pos_vec, vel_vec)
    ang_mom_mag = np.linalg.norm(ang_mom_vec)
    if ang_mom_mag <= eps * pos_mag * np.linalg.norm(vel_vec):
      raise ValueError("pv_to_coe() cannot convert a rectilinear state (zero angular momentum)")
    ang_mom_dir = ang_mom_vec / ang_mom_mag

    # Eccentricity vector and conic size
    ecc_vec = np.cross(vel_vec, ang_mom_vec) / gp - pos_dir
    ecc_mag = np.linalg.norm(ecc_vec)
    slr     = ang_mom_mag**2 / gp
    if abs(1.0 - ecc_mag) > eps:
      sma = slr / (1.0 - ecc_mag**2)
    else:
      sma     = np.inf
      ecc_mag = 1.0

    # Perifocal and node directions
    ecc_dir  = ecc_vec / ecc_mag if ecc_mag > eps else pos_dir.copy()
    node_vec = np.array([-ang_mom_dir[1], ang_mom_dir[0], 0.0])
    node_mag = np.linalg.norm(node_vec)
    if node_mag > eps:
      raan = np.arctan2(ang_mom_dir[0], -ang_mom_dir[1])
    else:
      raan = 0.0
    node_dir = np.array([np.cos(raan), np.sin(raan), 0.0])

    # 3-1-3 orientation angles and true anomaly, all measured about ang_mom_dir
    inc = np.arccos(np.clip(ang_mom_dir[2], -1.0, 1.0))
    aop = np.arctan2(np.dot(np.cross(node_dir, ecc_dir), ang_mom_dir), np.dot(node_dir, ecc_dir))
    ta  = np.arctan2(np.dot(np.cross(ecc_dir,  pos_dir), ang_mom_dir), np.dot(ecc_dir,  pos_dir))

    # Conic-specific anomalies
    ea = None
    ha = None
    pa = None
    if ecc_mag < 1.0:
      ea = OrbitConverter.ta_to_ea(ta, ecc_mag)
      ma = OrbitConverter.ea_to_ma(ea, ecc_mag) % (2 * np.pi)
    elif ecc_mag > 1.0:
      ha = OrbitConverter.ta_to_ha(ta, ecc_mag)
      ma = OrbitConverter.ha_to_mha(ha, ecc_mag)
    else:
      pa = np.tan(ta / 2)
      ma = pa + pa**3 / 3

    return {
      'sma'  : sma,
      'ecc'  : ecc_mag,
      'inc'  : inc,
      'raan' : raan,
      'aop'  : aop,
      'slr'  : slr,
      'ta'   : ta,
      'ma'   : ma,
      'ea'   : ea,
      'ha'   : ha,
      'pa'   : pa,
    }

  @staticmethod
  def coe_to_pv(
    coe : dict,
    gp  : float,
  ) -> tuple[np.ndarray, np.ndarray]:
    """
    Convert classical orbital elements to position and velocity vectors.

    Input:
    ------
      coe : dict
        sma  : semi-major axis
        ecc  : eccentricity [-]
        inc  : inclination [rad]
        raan : RAAN [rad]
        aop  : argument of periapsis [rad]
        ta   : true anomaly [rad]
        slr  : semi-latus rectum (optional, required for parabolic orbits)
      gp : float
        Gravitational parameter

    Output:
    -------
      pos_vec : np.ndarray
        Position vector
      vel_vec : np.ndarray
        Velocity vector

    Source:
    -------
      Modified from
      Analytical Mechanics of Space Systems, Fourth Edition
      Hanspeter Schaub and John L. Junkins
      DOI: https://doi.org/10.2514/4.105210
    """
    ecc  = coe['ecc' ]
    inc  = coe['inc' ]
    raan = coe['raan']
    aop  = coe['aop' ]

    ta = coe.get('ta', None)
    if ta is None:
      raise ValueError("True anomaly 'ta' must be provided to coe_to_pv()")

    # Conic size
    slr = coe.get('slr', None)
    if slr is None:
      if ecc == 1.0:
        raise ValueError("Semi-latus rectum 'slr' must be provided for parabolic orbits")
      slr = coe['sma'] * (1 - ecc**2)

    pos_mag = slr / (1 + ecc * np.cos(ta))
    if pos_mag <= 0:
      raise ValueError(f"True anomaly {ta} lies outside the asymptotes of the hyperbola (ecc = {ecc})")

    # True latitude angle and angular momentum magnitude
    theta       = aop + ta
    ang_mom_mag = np.sqrt(gp * slr)

    cos_raan, sin_raan   = np.cos(raan),  np.sin(raan)
    cos_inc,  sin_inc    = np.cos(inc),   np.sin(inc)
    cos_theta, sin_theta = np.cos(theta), np.sin(theta)

    pos_vec = pos_mag * np.array([
      cos_raan * cos_theta - sin_raan * sin_theta * cos_inc,
      sin_raan * cos_theta + cos_raan * sin_theta * cos_inc,
                                        sin_theta * sin_inc,
    ])

    # Velocity from the transverse and eccentricity-driven radial components
    sin_term = sin_theta + ecc * np.sin(aop)
    cos_term = cos_theta + ecc * np.cos(aop)
    vel_vec  = -gp / ang_mom_mag * np.array([
      cos_raan * sin_term + sin_raan * cos_term * cos_inc,
      sin_raan * sin_term - cos_raan * cos_term * cos_inc,
                                    -cos_term * sin_inc,
    ])

    return pos_vec, vel_vec

  @staticmethod
  def cartesian_to_elements(
    state        : np.ndarray,
    gp           : float,
    anomaly_type : str = 'mean',
  ) -> dict:
    """
    Convert a Cartesian state to classical elements with the selected anomaly.

    Input:
    ------
      state : np.ndarray
        State vector [pos_x, pos_y, pos_z, vel_x, vel_y, vel_z].
      gp : float
        Gravitational parameter.
      anomaly_type : str
        'mean' or 'true'.

    Output:
    -------
      elements : dict
        sma, ecc, inc, raan, aop, slr and either 'ma' or 'ta'.
    """
    anomaly_key = OrbitConverter._anomaly_key(anomaly_type)

    state = np.asarray(state, dtype=float).flatten()
    if state.size != 6:
      raise ValueError(f"cartesian_to_elements() requires a 6-element state, received {state.size} elements")

    coe = OrbitConverter.pv_to_coe(state[0:3], state[3:6], gp)

    elements = {key: coe[key] for key in ('sma', 'ecc', 'inc', 'raan', 'aop', 'slr')}
    elements[anomaly_key] = coe[anomaly_key]
    return elements

  @staticmethod
  def elements_to_cartesian(
    elements     : dict,
    gp           : float,
    anomaly_type : str = 'mean',
  ) -> np.ndarray:
    """
    Convert classical elements with the selected anomaly to a Cartesian state.

    Input:
    ------
      elements : dict
        sma, ecc, inc, raan, aop, optionally slr, and 'ma' or 'ta'.
      gp : float
        Gravitational parameter.
      anomaly_type : str
        'mean' or 'true'.

    Output:
    -------
      state : np.ndarray
        State vector [pos_x, pos_y, pos_z, vel_x, vel_y, vel_z].
    """
    anomaly_key = OrbitConverter._anomaly_key(anomaly_type)

    coe = dict(elements)
    if anomaly_key == 'ma':
      coe['ta'] = OrbitConverter.ma_to_ta(coe['ma'], coe['ecc'])

    pos_vec, vel_vec = OrbitConverter.coe_to_pv(coe, gp)
    return np.concatenate((pos_vec, vel_vec))

  @staticmethod
  def _anomaly_key(
    anomaly_type : str,
  ) -> str:
    key = OrbitConverter.ANOMALY_KEYS.get(str(anomaly_type).lower(), None)
    if key is None:
      raise ValueError(f"Unknown anomaly type '{anomaly_type}'. Use 'mean' or 'true'.")
    return key

  @staticmethod
  def mean_motion(
    coe : dict,
    gp  : float,
  ) -> float:
    """
    Rate of change of the mean anomaly.

    Input:
    ------
      coe : dict
        Orbital elements with 'sma', 'ecc' and, for parabolic orbits, 'slr'.
      gp : float
        Gravitational parameter.

    Output:
    -------
      mean_motion : float
        sqrt(gp/|sma|³), or 2*sqrt(gp/slr³) for parabolic orbits [rad/s].
    """
    if coe['ecc'] == 1.0 or not np.isfinite(coe['sma']):
      return 2.0 * np.sqrt(gp / coe['slr']**3)
    return np.sqrt(gp / abs(coe['sma'])**3)

  @staticmethod
  def pv_to_specific_energy(
    pos_vec : np.ndarray,
    vel_vec : np.ndarray,
    gp      : float,
  ) -> float:
    """
    Specific mechanical energy v²/2 - gp/r of a Cartesian state.
    """
    pos_vec = np.asarray(pos_vec, dtype=float).flatten()
    vel_vec = np.asarray(vel_vec, dtype=float).flatten()
    return float(np.dot(vel_vec, vel_vec) / 2.0 - gp / np.linalg.norm(pos_vec))

  @staticmethod
  def pv_to_ang_mom(
    pos_vec : np.ndarray,
    vel_vec : np.ndarray,
  ) -> np.ndarray:
    """
    Specific angular momentum vector r x v of a Cartesian state.
    """
    return np.cross(np.asarray(pos_vec, dtype=float).flatten(), np.asarray(vel_vec, dtype=float).flatten())

  @staticmethod
  def ma_to_ta(
    ma  : float,
    ecc : float,
  ) -> float:
    """
    Maps mean anomaly to true anomaly for any non-rectilinear conic.

    Input:
    ------
      ma : float
        Mean anomaly [rad] (mean hyperbolic or mean parabolic anomaly for
        unbound orbits)
      ecc : float
        Eccentricity

    Output:
    -------
      ta : float
        True anomaly [rad]
    """
    if ecc < 1:
      return OrbitConverter.ea_to_ta(OrbitConverter.ma_to_ea(ma, ecc), ecc)
    if ecc > 1:
      return OrbitConverter.ha_to_ta(OrbitConverter.mha_to_ha(ma, ecc), ecc)
    return 2 * np.arctan(OrbitConverter.mpa_to_pa(ma))

  @staticmethod
  def ea_to_ta(
    ea  : float,
    ecc : float,
  ) -> float:
    """
    Maps eccentric anomaly to true anomaly for elliptic orbits.
    """
    if not 0 <= ecc < 1:
      raise ValueError(f"ea_to_ta() requires 0 <= ecc < 1, received ecc = {ecc}")
    return 2 * np.arctan2(
      np.sqrt(1 + ecc) * np.sin(ea / 2),
      np.sqrt(1 - ecc) * np.cos(ea / 2)
    )

  @staticmethod
  def ta_to_ea(
    ta  : float,
    ecc : float,
  ) -> float:
    """
    Maps true anomaly to eccentric anomaly for elliptic orbits.
    """
    if not 0 <= ecc < 1:
      raise ValueError(f"ta_to_ea() requires 0 <= ecc < 1, received ecc = {ecc}")
    return 2 * np.arctan2(
      np.sqrt(1 - ecc) * np.sin(ta / 2),
      np.sqrt(1 + ecc) * np.cos(ta / 2)
    )

  @staticmethod
  def ea_to_ma(
    ea  : float,
    ecc : float,
  ) -> float:
    """
    Maps eccentric anomaly to mean anomaly for elliptic orbits.
    """
    if not 0 <= ecc < 1:
      raise ValueError(f"ea_to_ma() requires 0 <= ecc < 1, received ecc = {ecc}")
    return ea - ecc * np.sin(ea)

  @staticmethod
  def ta_to_ha(
    ta  : float,
    ecc : float,
  ) -> float:
    """
    Maps true anomaly to hyperbolic anomaly for hyperbolic orbits.
    """
    if not ecc > 1:
      raise ValueError(f"ta_to_ha() requires ecc > 1, received ecc = {ecc}")
    return 2 * np.arctanh(np.sqrt((ecc - 1) / (ecc + 1)) * np.tan(ta / 2))

  @staticmethod
  def ha_to_ta(
    ha  : float,
    ecc : float,
  ) -> float:
    """
    Maps hyperbolic anomaly to true anomaly for hyperbolic orbits.
    """
    if not ecc > 1:
      raise ValueError(f"ha_to_ta() requires ecc > 1, received ecc = {ecc}")
    return 2 * np.arctan(np.sqrt((ecc + 1) / (ecc - 1)) * np.tanh(ha / 2))

  @staticmethod
  def ha_to_mha(
    ha  : float,
    ecc : float,
  ) -> float:
    """
    Maps hyperbolic anomaly to mean hyperbolic anomaly for hyperbolic orbits.
    """
    if not ecc > 1:
      raise ValueError(f"ha_to_mha() requires ecc > 1, received ecc = {ecc}")
    return ecc * np.sinh(ha) - ha

  @staticmethod
  def ma_to_ea(
    ma  : float,
    ecc : float,
  ) -> float:
    """
    Maps mean anomaly to eccentric anomaly. Alias for TwoBodyRootSolvers.kepler_elliptic().
    """
    if not 0 <= ecc < 1:
      raise ValueError(f"ma_to_ea() requires 0 <= ecc < 1, received ecc = {ecc}")
    return TwoBodyRootSolvers.kepler_elliptic(ma, ecc)

  @staticmethod
  def mha_to_ha(
    mha : float,
    ecc : float,
  ) -> float:
    """
    Maps mean hyperbolic anomaly to hyperbolic anomaly. Alias for TwoBodyRootSolvers.kepler_hyperbolic().
    """
    if not ecc > 1:
      raise ValueError(f"mha_to_ha() requires ecc > 1, received ecc = {ecc}")
    return TwoBodyRootSolvers.kepler_hyperbolic(mha, ecc)

  @staticmethod
  def mpa_to_pa(
    mpa : float,
  ) -> float:
    """
    Maps mean parabolic anomaly to parabolic anomaly. Alias for TwoBodyRootSolvers.barker().
    """
    return TwoBodyRootSolvers.barker(mpa)
