'''
Collect tools to manipulate sparse and/or mixed dense/sparse matrices.

State-space matrices can be stored either as ``numpy.ndarray`` or as ``csc_matrix`` (a wrapper of
``scipy.sparse.csc_matrix``). While numpy/scipy automatically handle most operations between mixed dense/sparse
arrays, some (e.g. dot product, block assembly) require more attention. This library collects methods to handle
these situations.

Methods:
- dot: handles matrix dot products across different types.
- solve: solves linear systems Ax=b with A and b dense, sparse or mixed.
- dense: convert matrix to numpy array
- block_diag, hstack, vstack: block assembly, sparse only if all blocks are sparse
- eye_as: identity matrix of the same type

Warning:
- only sparse types into SupportedTypes are supported!
'''

import numpy as np
import scipy.linalg as scalg
import scipy.sparse as sparse
import scipy.sparse.linalg as spalg


class csc_matrix(sparse.csc_matrix):
    '''
    Wrapper of scipy.csc_matrix that returns numpy.ndarray upon conversion to dense.
    '''

    def todense(self, order=None, out=None):
        ''' As per scipy.spmatrix.todense but returns a numpy.ndarray. '''
        return super().toarray(order=order, out=out)


SupportedTypes = [np.ndarray, csc_matrix]


def as_supported(M):
    '''
    Converts numbers, sequences and scipy sparse matrices to one of the SupportedTypes. Dense matrices are returned
    as 2D float (or complex) arrays.
    '''
    if type(M) is csc_matrix:
        return M
    if sparse.issparse(M):
        return csc_matrix(M)
    M = np.array(M)
    if not np.iscomplexobj(M):
        M = M.astype(float)
    return M


def is_sparse(M):
    return type(M) is csc_matrix


def dot(A, B, type_out=None):
    '''
    Method to compute
        C = A*B ,
    where * is the matrix product, with dense/sparse/mixed matrices.

    The format (sparse or dense) of C is specified through 'type_out'. If
    type_out==None, the output format is sparse if both A and B are sparse, dense
    otherwise.
    '''
    tA = type(A)
    tB = type(B)

    assert tA in SupportedTypes, 'Type of A matrix (%s) not supported' % tA
    assert tB in SupportedTypes, 'Type of B matrix (%s) not supported' % tB
    if type_out is None:
        type_out = csc_matrix if (tA == csc_matrix and tB == csc_matrix) else np.ndarray
    else:
        assert type_out in SupportedTypes, 'type_out not supported'

    if tA == np.ndarray and tB == csc_matrix:
        C = (B.transpose()).dot(A.transpose()).transpose()
    else:
        C = A.dot(B)

    if type_out == csc_matrix:
        return csc_matrix(C)
    if sparse.issparse(C):
        return C.toarray()
    return np.asarray(C)


def solve(A, b):
    '''
    Wrapper of
        numpy.linalg.solve and scipy.sparse.linalg.spsolve
    for solution of the linear system A x = b. The solution is always dense.
    '''
    tA = type(A)
    tB = type(b)

    assert tA in SupportedTypes, 'Type of A matrix (%s) not supported' % tA
    assert tB in SupportedTypes, 'Type of B matrix (%s) not supported' % tB

    if tA == np.ndarray:
        x = np.linalg.solve(A, dense(b))
    else:
        x = spalg.spsolve(A, dense(b))
        if sparse.issparse(x):
            x = x.toarray()
        x = np.asarray(x).reshape(A.shape[1], -1)

    return x


def dense(M):
    ''' If required, converts sparse array to dense. '''
    if sparse.issparse(M):
        return np.array(M.toarray())
    return M


def eye_as(M):
    ''' Produces an identity matrix as per M, in shape and type '''
    tM = type(M)
    assert tM in SupportedTypes, 'Type %s not supported!' % tM
    nrows = M.shape[0]
    assert nrows == M.shape[1], 'Not a square matrix!'

    if tM == csc_matrix:
        return csc_matrix(sparse.identity(nrows, format='csc'))
    return np.eye(nrows)


def block_diag(*mats):
    ''' Block diagonal matrix. Sparse if all the blocks are sparse. '''
    if mats and all(is_sparse(M) for M in mats):
        return csc_matrix(sparse.block_diag(mats, format='csc'))
    return scalg.block_diag(*[dense(M) for M in mats])


def hstack(mats):
    ''' Column-wise concatenation. Sparse if all the blocks are sparse. '''
    if all(is_sparse(M) for M in mats):
        return csc_matrix(sparse.hstack(mats, format='csc'))
    return np.concatenate([dense(M) for M in mats], axis=1)


def vstack(mats):
    ''' Row-wise concatenation. Sparse if all the blocks are sparse. '''
    if all(is_sparse(M) for M in mats):
        return csc_matrix(sparse.vstack(mats, format='csc'))
    return np.concatenate([dense(M) for M in mats], axis=0)
