import yaml
import numpy as np

from pathlib import Path
from types   import SimpleNamespace
from typing  import Optional

from universal_kepler.model.constants     import CONVERTER, SOLARSYSTEMCONSTANTS
from universal_kepler.utility.time_helper import normalize_time_unit


DEFAULTS = {
  'name'              : 'CustomObject',
  'state_vector_file' : None,
  'state'             : None,
  'gp'                : None,
  'central_body'      : 'SUN',
  'distance_unit'     : 'km',
  'time_unit'         : 'days',
  'time_steps'        : [0.0],
  'workers'           : None,
  'log_file'          : None,
}


def parse_float(
  raw_val,
) -> float:
  """
  Convert a YAML scalar to float. PyYAML reads exponent notation without a
  decimal point, such as 150e6, as a string.
  """
  if isinstance(raw_val, str):
    return float(raw_val.strip())
  return float(raw_val)


def parse_vector(
  raw_val,
  size  : int,
  label : str,
) -> np.ndarray:
  """
  Parse a vector given as a list or as an "x, y, z" string.

  Input:
  ------
    raw_val : list | str
      Raw file value.
    size : int
      Required number of components.
    label : str
      Key name used in error messages.

  Output:
  -------
    vec : np.ndarray
      Parsed vector.
  """
  if isinstance(raw_val, str):
    # Remove brackets if present and split
    clean = raw_val.replace('[', '').replace(']', '')
    vec   = np.array([parse_float(x) for x in clean.split(',')])
  elif isinstance(raw_val, (list, tuple)):
    vec = np.array([parse_float(x) for x in raw_val])
  else:
    raise ValueError(f"Unknown format for '{label}': {raw_val}")

  if vec.size != size:
    raise ValueError(f"'{label}' must have {size} components, received {vec.size}.")
  return vec


def load_state_vector_file(
  filepath : str | Path,
) -> dict:
  """
  Load a state vector .yaml file.

  Supported keys:
    name          : object name
    state         : [x, y, z, vx, vy, vz]   (or pos_vec and vel_vec)
    gp            : gravitational parameter (or central_body)
    distance_unit : 'm' or 'km'
    time_unit     : 'seconds' or 'days'
    time_steps    : scalar or list of elapsed times

  Input:
  ------
    filepath : str | Path
      Path to the file.

  Output:
  -------
    values : dict
      Parsed values keyed like the command-line options.
  """
  filepath = Path(filepath)
  if not filepath.exists():
    raise FileNotFoundError(f"State vector file not found: {filepath}")

  with open(filepath, 'r') as f:
    sv_data = yaml.safe_load(f) or {}

  if not isinstance(sv_data, dict):
    raise ValueError(f"State vector file {filepath} must contain a mapping of keys to values.")

  values = {}

  if 'name' in sv_data:
    values['name'] = str(sv_data['name'])

  # Support 'state' (6-element list) OR 'pos_vec' and 'vel_vec'
  if 'state' in sv_data:
    values['state'] = parse_vector(sv_data['state'], 6, 'state')
  elif 'pos_vec' in sv_data and 'vel_vec' in sv_data:
    values['state'] = np.concatenate((
      parse_vector(sv_data['pos_vec'], 3, 'pos_vec'),
      parse_vector(sv_data['vel_vec'], 3, 'vel_vec'),
    ))
  elif 'pos_vec' in sv_data or 'vel_vec' in sv_data:
    raise ValueError(f"State vector file {filepath} must contain both 'pos_vec' and 'vel_vec'.")

  if 'gp' in sv_data:
    values['gp'] = parse_float(sv_data['gp'])
  if 'central_body' in sv_data:
    values['central_body'] = str(sv_data['central_body']).upper()
  if 'distance_unit' in sv_data:
    values['distance_unit'] = str(sv_data['distance_unit']).lower()
  if 'time_unit' in sv_data:
    values['time_unit'] = str(sv_data['time_unit']).lower()
  if 'time_steps' in sv_data:
    raw_steps = sv_data['time_steps']
    if not isinstance(raw_steps, (list, tuple)):
      raw_steps = [raw_steps]
    values['time_steps'] = [parse_float(x) for x in raw_steps]

  return values


def build_config(
  state             : Optional[list] = None,
  state_vector_file : Optional[str]  = None,
  gp                : Optional[float] = None,
  central_body      : Optional[str]  = None,
  distance_unit     : Optional[str]  = None,
  time_steps        : Optional[list] = None,
  time_unit         : Optional[str]  = None,
  workers           : Optional[int]  = None,
  log_file          : Optional[str]  = None,
) -> SimpleNamespace:
  """
  Merge command-line values, state vector file values and defaults into a run
  configuration.

  Input:
  ------
    state : list | None
      Initial state [x, y, z, vx, vy, vz].
    state_vector_file : str | None
      Path to a state vector .yaml file.
    gp : float | None
      Gravitational parameter in distance unit^3/s^2.
    central_body : str | None
      Name of a tabulated central body. Ignored when a gp is given.
    distance_unit : str | None
      'm' or 'km'.
    time_steps : list | None
      Elapsed times since the initial state.
    time_unit : str | None
      'seconds' or 'days'.
    workers : int | None
      Number of worker processes.
    log_file : str | None
      Log file path.

  Output:
  -------
    config : SimpleNamespace
      Run configuration. config.user_set lists the keys given on the command
      line or in the file.

  Raises:
  -------
    ValueError
      If the state is missing or a value is not supported.
  """
  cli_values = {
    'state'         : state,
    'gp'            : gp,
    'central_body'  : central_body,
    'distance_unit' : distance_unit,
    'time_steps'    : time_steps,
    'time_unit'     : time_unit,
    'workers'       : workers,
    'log_file'      : log_file,
  }

  # Defaults, then file, then command line
  values = dict(DEFAULTS)
  if state_vector_file is not None:
    values['state_vector_file'] = state_vector_file
    file_values = load_state_vector_file(state_vector_file)
    values.update(file_values)
    user_set = set(file_values) | {'state_vector_file'}
  else:
    user_set = set()

  for key, value in cli_values.items():
    if value is not None:
      values[key] = value
      user_set.add(key)

  # A gp given on the command line replaces a central body from the file
  if gp is not None:
    values['central_body'] = None
  elif central_body is not None:
    values['gp'] = None
  elif values['gp'] is not None and 'central_body' not in user_set:
    values['central_body'] = None

  if values['state'] is None:
    raise ValueError("An initial state is required. Use --state or --state-vector-file.")
  state_vec = parse_vector(list(values['state']), 6, 'state')

  distance_unit = str(values['distance_unit']).lower()
  if distance_unit not in CONVERTER.GP_SCALE_PER_DISTANCE_UNIT:
    raise ValueError(f"Distance unit must be 'm' or 'km', received '{values['distance_unit']}'.")

  # Tabulated gravitational parameters are in m^3/s^2
  if values['gp'] is not None:
    gp_value = float(values['gp'])
  else:
    central_body = str(values['central_body']).upper()
    if central_body not in SOLARSYSTEMCONSTANTS.NAME_TO_GP:
      raise ValueError(
        f"Central body '{central_body}' is not supported. "
        f"Supported bodies: {list(SOLARSYSTEMCONSTANTS.NAME_TO_GP.keys())}"
      )
    values['central_body'] = central_body
    gp_value = SOLARSYSTEMCONSTANTS.NAME_TO_GP[central_body] * CONVERTER.GP_SCALE_PER_DISTANCE_UNIT[distance_unit]

  if values['workers'] is not None and int(values['workers']) < 1:
    raise ValueError(f"Number of workers must be at least 1, received {values['workers']}.")

  return SimpleNamespace(
    name              = values['name'],
    state_vector_file = values['state_vector_file'],
    state             = state_vec,
    gp                = gp_value,
    central_body      = values['central_body'],
    distance_unit     = distance_unit,
    time_unit         = normalize_time_unit(values['time_unit']),
    time_steps        = np.asarray(values['time_steps'], dtype=float),
    workers           = values['workers'],
    log_filepath      = Path(values['log_file']) if values['log_file'] is not None else None,
    user_set          = user_set,
  )


def print_configuration(
  config : SimpleNamespace,
) -> None:
  """
  Print the effective run configuration in a formatted table.

  Input:
  ------
    config : SimpleNamespace
      Run configuration from build_config.

  Output:
  -------
    None
  """
  state_str      = ' '.join(f"{x:.6e}" for x in config.state)
  time_steps_str = ' '.join(f"{t:g}" for t in config.time_steps)
  log_file_str   = str(config.log_filepath) if config.log_filepath is not None else None

  # Build configuration entries: (name, value, default)
  entries = [
    ('name',              config.name,              DEFAULTS['name']             ),
    ('state_vector_file', config.state_vector_file, DEFAULTS['state_vector_file']),
    ('state',             state_str,                DEFAULTS['state']            ),
    ('gp',                f"{config.gp:.6e}",       DEFAULTS['gp']               ),
    ('central_body',      config.central_body,      DEFAULTS['central_body']     ),
    ('distance_unit',     config.distance_unit,     DEFAULTS['distance_unit']    ),
    ('time_unit',         config.time_unit,         DEFAULTS['time_unit']        ),
    ('time_steps',        time_steps_str,           DEFAULTS['time_steps']       ),
    ('workers',           config.workers,           DEFAULTS['workers']          ),
    ('log_file',          log_file_str,             DEFAULTS['log_file']         ),
  ]

  # Convert entries to strings for width calculation
  headers = ['Argument', 'Value', 'Default', 'User Set']
  rows = []
  for name, value, default in entries:
    rows.append([
      name,
      str(value) if value is not None else "None",
      str(default) if default is not None else "None",
      str(name in config.user_set),
    ])

  # Calculate column widths: max of header and all values, plus 4 for spacing
  min_spacing = 4
  col_widths = []
  for col_idx in range(len(headers)):
    max_len = len(headers[col_idx])
    for row in rows:
      max_len = max(max_len, len(row[col_idx]))
    col_widths.append(max_len + min_spacing)

  # Print table
  print("\nInput Configuration")
  header_line = "  " + "".join(h.ljust(col_widths[i]) for i, h in enumerate(headers))
  print(header_line)
  separator_line = "  " + "".join(("-" * (col_widths[i] - min_spacing)).ljust(col_widths[i]) for i in range(len(headers)))
  print(separator_line)

  for row in rows:
    row_line = "  " + "".join(row[col_idx].ljust(col_widths[col_idx]) for col_idx in range(len(row)))
    print(row_line)
