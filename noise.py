#
# Simplex noise in N dimensions, vectorised with numpy.
#
# Based on example code by Stefan Gustavson (stegu@itn.liu.se).
# Optimisations by Peter Eastman (peastman@drizzle.stanford.edu).
# Better rank ordering method by Stefan Gustavson in 2012.
#
# This code was placed in the public domain by its original author,
# Stefan Gustavson. You may use it as you see fit, but
# attribution is appreciated.
#
#
import numpy
import itertools


SEED_MASK = (1 << 64) - 1

p = numpy.array( [151,160,137,91,90,15,
    131,13,201,95,96,53,194,233,7,225,140,36,103,30,69,142,8,99,37,240,21,10,23,
    190, 6,148,247,120,234,75,0,26,197,62,94,252,219,203,117,35,11,32,57,177,33,
    88,237,149,56,87,174,20,125,136,171,168, 68,175,74,165,71,134,139,48,27,166,
    77,146,158,231,83,111,229,122,60,211,133,230,220,105,92,41,55,46,245,40,244,
    102,143,54, 65,25,63,161, 1,216,80,73,209,76,132,187,208, 89,18,169,200,196,
    135,130,116,188,159,86,164,100,109,198,173,186, 3,64,52,217,226,250,124,123,
    5,202,38,147,118,126,255,82,85,212,207,206,59,227,47,16,58,17,182,189,28,42,
    223,183,170,213,119,248,152, 2,44,154,163, 70,221,153,101,155,167, 43,172,9,
    129,22,39,253, 19,98,108,110,79,113,224,232,178,185, 112,104,218,246,97,228,
    251,34,242,193,238,210,144,12,191,179,162,241, 81,51,145,235,249,14,239,107,
    49,192,214, 31,181,199,106,157,184, 84,204,176,115,121,50,45,127, 4,150,254,
    138,236,205,93,222,114,67,29,24,72,243,141,128,195,78,66,215,61,156,180] )

# Squared radius of influence of each simplex corner.
RADIUS2 = 0.5
# Output scale per dimension so results stay close to [-1,1].
OUTPUT_SCALE = {1: 64.0, 2: 70.0, 3: 32.0}


# returns floor of floating point array by coercing to integer
def fastfloor(x):
    return numpy.floor(x).astype(numpy.int64)


_gradient_tables = {}


def gradients(n):
    '''
    gradient directions for n dimensions: midpoints of the hypercube edges
    plus (for n>2) its corners
    '''
    grad = _gradient_tables.get(n)
    if grad is None:
        grad = ((0,-1,1),)*n
        grad = numpy.array(list(itertools.product(*grad))[1:])
        grad = grad[numpy.abs(grad).sum(-1)>=n-1]
        _gradient_tables[n] = grad
    return grad


class SimplexNoise:
    '''
    N-D simplex noise. Each instance owns a permutation table: with a seed it is
    drawn from numpy's PCG64 generator (identical on every platform), without one
    the classic reference permutation is used.
    '''
    def __init__(self, seed=None):
        self.seed = seed
        if seed is None:
            p0 = p
        else:
            rng = numpy.random.default_rng(int(seed) & SEED_MASK)
            p0 = rng.permutation(256)
        # To remove the need for index wrapping, double the permutation table length
        self.perm0 = numpy.concatenate([p0, p0]).astype(numpy.int64)

    def noise(self, Z):
        '''
        Z: array of shape (n, N), n points in N dimensions. Returns n values.
        '''
        Z = numpy.asarray(Z, dtype=numpy.float64)
        npts, N = Z.shape
        N1 = N+1 # number of simplex corners
        Fn = (N1**0.5 - 1.0)/N
        Gn = (N1 - N1**0.5)/N/N1

        # Skew the input space to determine which simplex cell we're in
        s = Z.sum(-1) * Fn
        i = fastfloor(Z + s[:,numpy.newaxis])
        t = i.sum(-1) * Gn
        z0 = Z - (i - t[:,numpy.newaxis]) # distances from the unskewed cell origin

        # Use magnitude ordering to determine the simplex that z0 is located in
        rank = numpy.zeros((npts, N), dtype=numpy.int64)
        for l,k in itertools.combinations(range(N),2):
            kl = z0[:,k]>=z0[:,l]
            rank[:,k] += kl
            rank[:,l] += ~kl

        # ind holds the skewed offsets of the N+1 simplex corners
        b = numpy.arange(N1)[:,numpy.newaxis,numpy.newaxis]
        ind = rank[numpy.newaxis] >= N - b
        # zk holds the unskewed distances from each corner
        zk = z0[numpy.newaxis] - ind + b * Gn

        # Hash the lattice corner; wrap only the hash input, never the offsets,
        # so the noise stays continuous at large coordinates.
        indi = (i[numpy.newaxis] + ind) & 255
        gik = numpy.zeros((N1, npts), dtype=numpy.int64)
        for x in range(N-1,-1,-1):
            gik = self.perm0[indi[:,:,x] + gik]
        grad = gradients(N)
        gik = gik % grad.shape[0]

        # Calculate the contribution from the simplex corners
        tk = RADIUS2 - (zk*zk).sum(-1)
        tk = numpy.where(tk > 0, tk, 0.0)
        tk = tk * tk
        nk = tk * tk * (grad[gik]*zk).sum(-1)

        return nk.sum(0) * OUTPUT_SCALE.get(N, 32.0)


if __name__ == '__main__':
    import time

    t=time.time()
    arr3 = numpy.mgrid[0:8:0.1,0:8:0.1,0:8:0.1].T
    arr3 = arr3.reshape((-1,3))
    n3 = SimplexNoise(3332).noise(arr3)
    print('arr3 noise',time.time()-t)
    print('STATS')
    print('######')
    print(n3.min(),n3.max(),numpy.average(n3))
