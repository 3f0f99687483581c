# Families (top nibble)
SYS = 0x0   # 00E0 / 00EE
JP = 0x1    # pc = nnn
CALL = 0x2  # push pc + 2; pc = nnn
SE = 0x3    # skip if Vx == kk
SNE = 0x4   # skip if Vx != kk
SER = 0x5   # skip if Vx == Vy
LD = 0x6    # Vx = kk
ADD = 0x7   # Vx += kk, no flag
ALU = 0x8   # 8xyN
SNER = 0x9  # skip if Vx != Vy
LDI = 0xA   # I = nnn
JPV = 0xB   # pc = nnn + V0
RND = 0xC   # Vx = rnd & kk
DRW = 0xD   # sprite n rows at (Vx, Vy)
SKP = 0xE   # ExNN
MISC = 0xF  # FxNN

# 0x0 family (full word)
CLS = 0x00E0    # clear display
RET = 0x00EE    # pc = pop

# 0x8 family (low nibble)
ALU_LD = 0x0    # Vx = Vy
ALU_OR = 0x1    # Vx |= Vy
ALU_AND = 0x2   # Vx &= Vy
ALU_XOR = 0x3   # Vx ^= Vy
ALU_ADD = 0x4   # Vx += Vy, VF = carry
ALU_SUB = 0x5   # Vx -= Vy, VF = no borrow
ALU_SHR = 0x6   # Vx >>= 1, VF = old LSB
ALU_SUBN = 0x7  # Vx = Vy - Vx, VF = no borrow
ALU_SHL = 0xE   # Vx <<= 1, VF = old MSB

# 0xE family (low byte)
SKP_DOWN = 0x9E     # skip if key[Vx] down
SKP_UP = 0xA1       # skip if key[Vx] up

# 0xF family (low byte)
LD_VX_DT = 0x07     # Vx = delay
LD_VX_K = 0x0A      # wait for key -> Vx
LD_DT_VX = 0x15     # delay = Vx
LD_ST_VX = 0x18     # sound = Vx
ADD_I_VX = 0x1E     # I += Vx
LD_F_VX = 0x29      # I = glyph address of Vx
LD_B_VX = 0x33      # BCD of Vx -> M[I..I+2]
LD_MI_VX = 0x55     # V0..Vx -> M[I..I+x]
LD_VX_MI = 0x65     # M[I..I+x] -> V0..Vx
