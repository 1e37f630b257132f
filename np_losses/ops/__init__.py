from np_losses.ops.ops import *
